"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.  Wire keys are camelCase.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.serializers import CustomerSerializer
from modules.orders.models import Order, OrderItem
from modules.products.serializers import ProductSummarySerializer

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single item in an order creation request."""

    productId = serializers.IntegerField(min_value=1, source="product_id")  # noqa: N815
    qty = serializers.IntegerField(min_value=1)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    customerId = serializers.IntegerField(min_value=1, source="customer_id")  # noqa: N815
    items = CreateOrderItemSerializer(many=True, allow_empty=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with the snapshotted price."""

    productId = serializers.IntegerField(source="product_id", read_only=True)  # noqa: N815
    product = ProductSummarySerializer(read_only=True)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True
    )

    class Meta:
        model = OrderItem
        fields = ["id", "productId", "product", "qty", "price"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with customer and nested items."""

    customerId = serializers.IntegerField(source="customer_id", read_only=True)  # noqa: N815
    customer = CustomerSerializer(read_only=True)
    total = serializers.DecimalField(
        max_digits=12, decimal_places=2, coerce_to_string=False, read_only=True
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    orderItems = OrderItemSerializer(source="items", many=True, read_only=True)  # noqa: N815

    class Meta:
        model = Order
        fields = [
            "id",
            "customerId",
            "customer",
            "status",
            "total",
            "createdAt",
            "orderItems",
        ]
        read_only_fields = fields
