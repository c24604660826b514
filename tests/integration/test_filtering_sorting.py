"""Integration tests for list filtering and sorting (products, customers)."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.customers.models import Customer
from modules.products.models import Product

pytestmark = pytest.mark.integration


@pytest.fixture()
def catalog():
    return [
        Product.objects.create(sku="LAP-1", name="Laptop Pro", price=Decimal("2500.00"), stock=3),
        Product.objects.create(sku="MOU-1", name="Mouse", price=Decimal("25.00"), stock=50),
        Product.objects.create(sku="KEY-1", name="Keyboard", price=Decimal("120.00"), stock=0),
    ]


def _skus(response):
    return [p["sku"] for p in response.json()["data"]]


class TestProductFiltering:
    def test_search_by_name(self, auth_client, catalog):
        response = auth_client.get("/api/v1/products/", {"search": "laptop"})
        assert _skus(response) == ["LAP-1"]

    def test_search_by_sku(self, auth_client, catalog):
        response = auth_client.get("/api/v1/products/", {"search": "mou"})
        assert _skus(response) == ["MOU-1"]

    def test_price_range(self, auth_client, catalog):
        response = auth_client.get(
            "/api/v1/products/", {"minPrice": "100", "maxPrice": "1000"}
        )
        assert _skus(response) == ["KEY-1"]

    def test_sort_by_price_desc(self, auth_client, catalog):
        response = auth_client.get(
            "/api/v1/products/", {"sortBy": "price", "order": "desc"}
        )
        assert _skus(response) == ["LAP-1", "KEY-1", "MOU-1"]

    def test_sort_by_name_asc(self, auth_client, catalog):
        response = auth_client.get("/api/v1/products/", {"sortBy": "name"})
        assert _skus(response) == ["KEY-1", "LAP-1", "MOU-1"]

    def test_default_sort_is_id(self, auth_client, catalog):
        response = auth_client.get("/api/v1/products/")
        assert _skus(response) == ["LAP-1", "MOU-1", "KEY-1"]

    def test_invalid_sort_field_is_400(self, auth_client, catalog):
        response = auth_client.get("/api/v1/products/", {"sortBy": "password"})
        assert response.status_code == 400


class TestCustomerFiltering:
    def test_search_name_or_email_newest_first(self, auth_client):
        ana = Customer.objects.create(name="Ana", email="ana@example.com")
        Customer.objects.create(name="Bruno", email="bruno@example.com")
        anabel = Customer.objects.create(name="Other", email="anabel@example.com")

        response = auth_client.get("/api/v1/customers/", {"search": "ana"})

        assert [c["id"] for c in response.json()["data"]] == [anabel.id, ana.id]
