"""Customer domain exceptions.

Raised by the Service Layer when business rules are violated.
The API exception handler translates them into HTTP responses
based on their base class.
"""

from __future__ import annotations

from modules.core.exceptions import ConflictError, NotFoundError


class CustomerAlreadyExists(ConflictError):
    """A customer with the same email already exists."""

    code = "customer_already_exists"


class CustomerNotFound(NotFoundError):
    """The requested customer does not exist."""

    code = "customer_not_found"
    resource = "customer"


class CustomerHasOrders(ConflictError):
    """The customer owns orders and cannot be deleted."""

    code = "customer_has_orders"
