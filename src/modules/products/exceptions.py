"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
The API exception handler translates them into HTTP responses
based on their base class.
"""

from __future__ import annotations

from modules.core.exceptions import ConflictError, NotFoundError


class ProductAlreadyExists(ConflictError):
    """A product with the same SKU already exists."""

    code = "product_already_exists"


class ProductNotFound(NotFoundError):
    """The requested product does not exist."""

    code = "product_not_found"
    resource = "product"


class ProductInUse(ConflictError):
    """The product is referenced by order items and cannot be deleted."""

    code = "product_in_use"
