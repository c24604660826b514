"""Unit tests for Product DRF serializers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.models import Product
from modules.products.serializers import ProductSerializer, ProductSummarySerializer

pytestmark = pytest.mark.unit


@pytest.fixture()
def product():
    return Product.objects.create(
        sku="SER-1", name="Serialized", price=Decimal("19.90"), stock=4
    )


class TestProductSerializer:
    def test_fields(self, product):
        data = ProductSerializer(product).data
        assert set(data) == {"id", "name", "sku", "price", "stock"}

    def test_price_is_a_number_not_a_string(self, product):
        data = ProductSerializer(product).data
        assert data["price"] == Decimal("19.90")
        assert not isinstance(data["price"], str)

    def test_all_fields_read_only(self):
        serializer = ProductSerializer()
        assert all(field.read_only for field in serializer.fields.values())


class TestProductSummarySerializer:
    def test_fields(self, product):
        data = ProductSummarySerializer(product).data
        assert data == {"id": product.id, "name": "Serialized", "sku": "SER-1"}
