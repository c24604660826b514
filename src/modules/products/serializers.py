"""Product DRF serializers for API output.

The serializer operates at the Interface layer (API Views).
Input validation lives in the Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True
    )

    class Meta:
        model = Product
        fields = ["id", "name", "sku", "price", "stock"]
        read_only_fields = fields


class ProductSummarySerializer(serializers.ModelSerializer):
    """Compact product reference embedded in order items."""

    class Meta:
        model = Product
        fields = ["id", "name", "sku"]
        read_only_fields = fields
