"""Customer DRF serializers for API output.

The serializer operates at the Interface layer (API Views).
Input validation lives in the Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    """Read serializer for the Customer resource (also embedded in orders)."""

    class Meta:
        model = Customer
        fields = ["id", "name", "email"]
        read_only_fields = fields
