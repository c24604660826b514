"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API exception handler translates them into HTTP responses
based on their base class.
"""

from __future__ import annotations

from typing import Any, Dict

from modules.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from modules.customers.exceptions import CustomerNotFound
from modules.products.exceptions import ProductNotFound

__all__ = [
    "CustomerNotFound",
    "InsufficientStock",
    "InvalidOrderItems",
    "InvalidOrderStatus",
    "OrderNotFound",
    "ProductNotFound",
]


class OrderNotFound(NotFoundError):
    """The requested order does not exist."""

    code = "order_not_found"
    resource = "order"


class InvalidOrderStatus(InvalidStateError):
    """The order is not in a status that allows the requested operation."""

    code = "invalid_order_status"


class InvalidOrderItems(ValidationError):
    """The order has no items, or an item has a non-positive quantity."""

    code = "invalid_order_items"


class InsufficientStock(ConflictError):
    """Not enough stock to confirm the order."""

    code = "insufficient_stock"

    def __init__(self, product_name: str, available: int, required: int) -> None:
        self.product_name = product_name
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, required: {required}."
        )

    def extra(self) -> Dict[str, Any]:
        return {
            "productName": self.product_name,
            "available": self.available,
            "required": self.required,
        }
