"""Unit tests for CustomerService.

Covers:
- create_customer: happy path, duplicate email.
- update_customer: happy path, not found, email taken.
- delete_customer: happy path, not found, customer with orders.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from django.db import IntegrityError

from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
from modules.customers.exceptions import (
    CustomerAlreadyExists,
    CustomerHasOrders,
    CustomerNotFound,
)
from modules.customers.models import Customer
from modules.customers.services import CustomerService

pytestmark = pytest.mark.unit


@pytest.fixture()
def mock_repo():
    repo = MagicMock()
    repo.save.side_effect = lambda customer: customer
    return repo


@pytest.fixture()
def service(mock_repo):
    return CustomerService(repository=mock_repo)


def _customer(**overrides) -> Customer:
    defaults = {"id": 1, "name": "Ana", "email": "ana@example.com"}
    defaults.update(overrides)
    return Customer(**defaults)


class TestCreateCustomer:
    def test_success(self, service, mock_repo):
        mock_repo.get_by_email.return_value = None
        customer = service.create_customer(
            CreateCustomerDTO(name="Ana", email="ANA@example.com")
        )
        assert customer.email == "ana@example.com"
        mock_repo.save.assert_called_once()

    def test_duplicate_email(self, service, mock_repo):
        mock_repo.get_by_email.return_value = _customer()
        with pytest.raises(CustomerAlreadyExists):
            service.create_customer(CreateCustomerDTO(name="A", email="ana@example.com"))
        mock_repo.save.assert_not_called()

    def test_integrity_error_becomes_conflict(self, service, mock_repo):
        # Free at the pre-check, taken by a concurrent insert at save time.
        mock_repo.get_by_email.side_effect = [
            None,
            _customer(id=9, email="a@example.com"),
        ]
        mock_repo.save.side_effect = IntegrityError("UNIQUE constraint failed")
        with pytest.raises(CustomerAlreadyExists):
            service.create_customer(CreateCustomerDTO(name="A", email="a@example.com"))

    def test_other_integrity_error_is_not_a_duplicate(self, service, mock_repo):
        mock_repo.get_by_email.return_value = None
        mock_repo.save.side_effect = IntegrityError("NOT NULL constraint failed")
        with pytest.raises(IntegrityError):
            service.create_customer(CreateCustomerDTO(name="A", email="a@example.com"))


class TestUpdateCustomer:
    def test_success(self, service, mock_repo):
        mock_repo.get_by_id.return_value = _customer()
        customer = service.update_customer(1, UpdateCustomerDTO(name="Ana Maria"))
        assert customer.name == "Ana Maria"
        assert customer.email == "ana@example.com"

    def test_not_found(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None
        with pytest.raises(CustomerNotFound):
            service.update_customer(1, UpdateCustomerDTO(name="X"))

    def test_email_taken(self, service, mock_repo):
        mock_repo.get_by_id.return_value = _customer(id=1)
        mock_repo.get_by_email.return_value = _customer(id=2, email="b@example.com")
        with pytest.raises(CustomerAlreadyExists):
            service.update_customer(1, UpdateCustomerDTO(email="b@example.com"))


class TestDeleteCustomer:
    def test_success(self, service, mock_repo):
        mock_repo.exists.return_value = True
        mock_repo.has_orders.return_value = False
        service.delete_customer(1)
        mock_repo.delete.assert_called_once_with(1)

    def test_not_found(self, service, mock_repo):
        mock_repo.exists.return_value = False
        with pytest.raises(CustomerNotFound):
            service.delete_customer(1)

    def test_customer_with_orders_cannot_be_deleted(self, service, mock_repo):
        mock_repo.exists.return_value = True
        mock_repo.has_orders.return_value = True
        with pytest.raises(CustomerHasOrders):
            service.delete_customer(1)
        mock_repo.delete.assert_not_called()


class TestQueries:
    def test_get_customer_not_found(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None
        with pytest.raises(CustomerNotFound) as exc_info:
            service.get_customer(9)
        assert exc_info.value.message == "Customer 9 not found."

    def test_list_customers_delegates(self, service, mock_repo):
        service.list_customers()
        mock_repo.list.assert_called_once_with(None)
