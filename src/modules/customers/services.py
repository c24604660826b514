"""Customer service layer (Use Cases).

Orchestrates business logic for the Customer aggregate, delegating
persistence to the injected ``ICustomerRepository``.

Business rules enforced here:
- Email must be unique.
- A customer with at least one order cannot be deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import IntegrityError, models, transaction
from django.db.models import ProtectedError

from modules.customers.exceptions import (
    CustomerAlreadyExists,
    CustomerHasOrders,
    CustomerNotFound,
)
from modules.customers.models import Customer

if TYPE_CHECKING:
    from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerService:
    """Application service for Customer use-cases.

    Receives an ``ICustomerRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICustomerRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_customer(self, dto: CreateCustomerDTO) -> Customer:
        """Create a new customer after enforcing email uniqueness.

        Raises:
            CustomerAlreadyExists: if the email is already taken.
        """
        log = logger.bind(email=dto.email)

        if self._repo.get_by_email(dto.email):
            log.warning("customer.duplicate_email")
            raise CustomerAlreadyExists("Email already registered.")

        customer = Customer(name=dto.name, email=dto.email)
        customer = self._save_unique(customer)
        log.info("customer.created", customer_id=customer.id)
        return customer

    @transaction.atomic
    def update_customer(self, id: int, dto: UpdateCustomerDTO) -> Customer:
        """Update an existing customer with the supplied fields.

        Raises:
            CustomerNotFound: if the customer does not exist.
            CustomerAlreadyExists: if the new email belongs to another customer.
        """
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(id)

        log = logger.bind(customer_id=id)

        if dto.email is not None and dto.email != customer.email:
            existing = self._repo.get_by_email(dto.email)
            if existing and existing.id != customer.id:
                log.warning("customer.duplicate_email")
                raise CustomerAlreadyExists("Email already in use by another customer.")

        for field in ("name", "email"):
            value = getattr(dto, field)
            if value is not None:
                setattr(customer, field, value)

        customer = self._save_unique(customer)
        log.info("customer.updated")
        return customer

    @transaction.atomic
    def delete_customer(self, id: int) -> None:
        """Delete a customer that owns no orders.

        Raises:
            CustomerNotFound: if the customer does not exist.
            CustomerHasOrders: if the customer owns at least one order.
        """
        if not self._repo.exists(id):
            raise CustomerNotFound(id)
        if self._repo.has_orders(id):
            logger.warning("customer.delete_blocked", customer_id=id)
            raise CustomerHasOrders("Cannot delete a customer with existing orders.")
        try:
            self._repo.delete(id)
        except ProtectedError as exc:
            # An order was placed between the check and the delete.
            raise CustomerHasOrders(
                "Cannot delete a customer with existing orders."
            ) from exc
        logger.info("customer.deleted", customer_id=id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_customers(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Customer]":
        """Return customers, optionally filtered (newest first)."""
        return self._repo.list(filters)

    def get_customer(self, id: int) -> Customer:
        """Retrieve a single customer by ID.

        Raises:
            CustomerNotFound: if the customer does not exist.
        """
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(id)
        return customer

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _save_unique(self, customer: Customer) -> Customer:
        try:
            with transaction.atomic():
                return self._repo.save(customer)
        except IntegrityError as exc:
            existing = self._repo.get_by_email(customer.email)
            if existing is None or existing.id == customer.id:
                raise
            raise CustomerAlreadyExists("Email already registered.") from exc
