"""Unit tests for CustomerDjangoRepository."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.repositories.interfaces import ICustomerRepository
from modules.orders.models import Order

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return CustomerDjangoRepository()


def _make_customer(**overrides) -> Customer:
    defaults = {"name": "Ana", "email": "ana@example.com"}
    defaults.update(overrides)
    return Customer.objects.create(**defaults)


class TestCustomerRepository:
    def test_is_instance_of_interface(self, repo):
        assert isinstance(repo, ICustomerRepository)

    def test_get_by_id(self, repo):
        customer = _make_customer()
        assert repo.get_by_id(customer.id) == customer

    def test_get_by_id_missing_or_malformed(self, repo):
        assert repo.get_by_id(999999) is None
        assert repo.get_by_id("abc") is None

    def test_exists(self, repo):
        customer = _make_customer()
        assert repo.exists(customer.id) is True
        assert repo.exists(999999) is False

    def test_get_by_email_is_case_insensitive(self, repo):
        customer = _make_customer(email="Mixed@Example.com")
        assert customer.email == "mixed@example.com"
        assert repo.get_by_email("MIXED@example.com") == customer

    def test_list_newest_first(self, repo):
        first = _make_customer(email="first@example.com")
        second = _make_customer(email="second@example.com")
        assert list(repo.list()) == [second, first]

    def test_has_orders(self, repo):
        customer = _make_customer()
        assert repo.has_orders(customer.id) is False
        Order.objects.create(customer=customer, total=Decimal("0.00"))
        assert repo.has_orders(customer.id) is True

    def test_delete(self, repo):
        customer = _make_customer()
        assert repo.delete(customer.id) is True
        assert repo.delete(customer.id) is False
