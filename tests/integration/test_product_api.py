"""Integration tests for Product API endpoints.

Covers:
- CRUD operations via /api/v1/products/.
- Domain exception mapping (404, 409).
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


@pytest.fixture()
def product():
    return Product.objects.create(
        sku="API-1", name="Api Product", price=Decimal("12.50"), stock=7
    )


class TestProductCrud:
    def test_create(self, auth_client):
        response = auth_client.post(
            URL, {"sku": "new-1", "name": "New", "price": "9.90", "stock": 3}, format="json"
        )
        assert response.status_code == 201
        body = response.json()
        assert body["sku"] == "NEW-1"
        assert body["price"] == 9.9
        assert body["stock"] == 3

    def test_create_duplicate_sku_is_409(self, auth_client, product):
        response = auth_client.post(
            URL, {"sku": "api-1", "name": "Dup", "price": "1.00"}, format="json"
        )
        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "product_already_exists"

    def test_create_negative_stock_is_400(self, auth_client):
        response = auth_client.post(
            URL, {"sku": "N", "name": "N", "price": "1.00", "stock": -1}, format="json"
        )
        assert response.status_code == 400

    def test_retrieve(self, auth_client, product):
        response = auth_client.get(f"{URL}{product.id}/")
        assert response.status_code == 200
        assert response.json() == {
            "id": product.id,
            "name": "Api Product",
            "sku": "API-1",
            "price": 12.5,
            "stock": 7,
        }

    def test_retrieve_missing_is_404(self, auth_client):
        response = auth_client.get(f"{URL}999999/")
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "product_not_found"

    def test_partial_update(self, auth_client, product):
        response = auth_client.patch(f"{URL}{product.id}/", {"stock": 40}, format="json")
        assert response.status_code == 200
        product.refresh_from_db()
        assert product.stock == 40
        assert product.name == "Api Product"

    def test_update_sku_to_existing_is_409(self, auth_client, product):
        other = Product.objects.create(sku="API-2", name="Other", price=Decimal("1.00"))
        response = auth_client.put(f"{URL}{other.id}/", {"sku": "API-1"}, format="json")
        assert response.status_code == 409

    def test_delete(self, auth_client, product):
        response = auth_client.delete(f"{URL}{product.id}/")
        assert response.status_code == 204
        assert not Product.objects.filter(id=product.id).exists()

    def test_delete_missing_is_404(self, auth_client):
        response = auth_client.delete(f"{URL}999999/")
        assert response.status_code == 404
