"""Django ORM implementation of the Customer repository.

Satisfies ``ICustomerRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising; the Service Layer decides how to translate a
missing entity into a domain error.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.db import models

from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Customer]:
        """Retrieve a customer by primary key.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return Customer.objects.filter(id=id).first()
        except (ValueError, TypeError):
            return None

    def exists(self, id: int) -> bool:
        try:
            return Customer.objects.filter(id=id).exists()
        except (ValueError, TypeError):
            return False

    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[Customer]":
        """List customers with optional Django ORM look-ups.

        Examples of valid filters::

            {"name__icontains": "acme"}
            {"email__iendswith": "@example.com"}
        """
        queryset = Customer.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def save(self, entity: Customer) -> Customer:
        """Persist (create or update) a customer."""
        is_new = entity._state.adding
        entity.save()
        logger.info("customer.saved", customer_id=entity.id, is_new=is_new)
        return entity

    def delete(self, id: int) -> bool:
        """Delete a customer by ID.

        Returns ``True`` if the customer was found and deleted,
        ``False`` if no customer exists with the given ID.
        """
        customer = self.get_by_id(id)
        if not customer:
            return False
        customer.delete()
        logger.info("customer.deleted", customer_id=id)
        return True

    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by email address (case-insensitive)."""
        return Customer.objects.filter(email=email.strip().lower()).first()

    def has_orders(self, id: int) -> bool:
        return Customer.objects.filter(id=id, orders__isnull=False).exists()
