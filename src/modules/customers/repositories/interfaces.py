"""Customer repository interface (Customer Store contract).

Extends ``IRepository[Customer]`` with the email look-up required by the
uniqueness rule and the order-ownership check behind the deletion guard.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Customer]":
        """List customers with optional filters."""

    @abstractmethod
    def exists(self, id: int) -> bool:
        """Return ``True`` if a customer with *id* exists."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by email address."""

    @abstractmethod
    def has_orders(self, id: int) -> bool:
        """Return ``True`` if the customer owns at least one order."""
