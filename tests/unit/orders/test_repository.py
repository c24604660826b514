"""Unit tests for OrderDjangoRepository."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from django.db import connection
from django.test.utils import CaptureQueriesContext
from freezegun import freeze_time

from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.repositories.interfaces import IOrderRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


@pytest.fixture()
def order(repo, customer, product_a, product_b):
    return repo.create(
        customer_id=customer.id,
        items=[
            {"product_id": product_a.id, "qty": 1, "price": product_a.price},
            {"product_id": product_b.id, "qty": 2, "price": product_b.price},
        ],
        total=Decimal("200.00"),
    )


class TestOrderRepository:
    def test_is_instance_of_interface(self, repo):
        assert isinstance(repo, IOrderRepository)

    def test_create_inserts_order_and_items(self, order):
        assert order.status == OrderStatus.PENDING
        assert order.total == Decimal("200.00")
        assert order.items.count() == 2

    def test_get_by_id_hydrates_relations(self, repo, order):
        fetched = repo.get_by_id(order.id)
        with CaptureQueriesContext(connection) as ctx:
            assert fetched.customer.email == "customer@example.com"
            skus = [item.product.sku for item in fetched.items.all()]
        assert skus == ["PROD-A", "PROD-B"]
        assert len(ctx.captured_queries) == 0

    def test_get_by_id_missing(self, repo):
        assert repo.get_by_id(999999) is None
        assert repo.get_by_id("x") is None

    def test_get_for_update(self, repo, order):
        locked = repo.get_for_update(order.id)
        assert locked.id == order.id
        assert len(list(locked.items.all())) == 2

    def test_update_status(self, repo, order):
        repo.update_status(order, OrderStatus.CONFIRMED)
        order.refresh_from_db()
        assert order.status == OrderStatus.CONFIRMED

    def test_update_status_touches_updated_at(self, repo, order):
        with freeze_time("2030-01-01 12:00:00"):
            repo.update_status(order, OrderStatus.CONFIRMED)
        order.refresh_from_db()
        assert order.updated_at == datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert order.created_at < order.updated_at

    def test_list_newest_first_and_filtered(self, repo, order, customer):
        second = Order.objects.create(customer=customer, total=Decimal("0.00"))
        repo.update_status(second, OrderStatus.CONFIRMED)

        assert [o.id for o in repo.list()] == [second.id, order.id]
        assert [o.id for o in repo.list({"status": OrderStatus.PENDING})] == [order.id]
        assert repo.list({"customer_id": customer.id + 1000}).count() == 0

    def test_delete_is_refused(self, repo, order):
        assert repo.delete(order.id) is False
        assert Order.objects.filter(id=order.id).exists()
