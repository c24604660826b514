"""Domain error taxonomy shared by every module.

Each bounded context subclasses these bases (``OrderNotFound``,
``InsufficientStock`` ...).  The API exception handler maps the *base*
class to an HTTP status, so new subclasses need no view changes.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Root of all business-rule violations raised by the service layer."""

    code = "error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or self.code

    def extra(self) -> Dict[str, Any]:
        """Additional diagnostic fields rendered next to ``detail``."""
        return {}


class ValidationError(DomainError):
    """Malformed input that slipped past the API layer."""

    code = "invalid"


class NotFoundError(DomainError):
    """A referenced customer, product or order does not exist."""

    code = "not_found"
    resource = "resource"

    def __init__(self, id: Optional[Any] = None, message: str = "") -> None:
        self.id = id
        if not message:
            message = (
                f"{self.resource.capitalize()} {id} not found."
                if id is not None
                else f"{self.resource.capitalize()} not found."
            )
        super().__init__(message)


class InvalidStateError(DomainError):
    """The entity is not in a state that allows the requested operation."""

    code = "invalid_state"


class ConflictError(DomainError):
    """The operation conflicts with current data (uniqueness, stock, references)."""

    code = "conflict"


class TransactionError(DomainError):
    """The underlying store failed to commit the unit of work.

    ``retryable`` is ``True`` for transient conflicts (deadlock,
    serialization failure, locked database) the caller may safely retry.
    """

    code = "transaction_failed"

    def __init__(self, message: str = "", retryable: bool = False) -> None:
        super().__init__(message or "Transaction could not be completed.")
        self.retryable = retryable
