"""OrderService against the real database.

Covers the workflow end to end below the HTTP layer: price snapshot and
total (P1), atomic creation (P2), the state machine (P3) and the
all-or-nothing stock decrement (P4).
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import (
    CustomerNotFound,
    InsufficientStock,
    InvalidOrderItems,
    InvalidOrderStatus,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.unit


def _dto(customer_id: int, *items: tuple[int, int]) -> CreateOrderDTO:
    return CreateOrderDTO(
        customer_id=customer_id,
        items=[CreateOrderItemDTO(product_id=pid, qty=qty) for pid, qty in items],
    )


# ===========================================================================
# create_order
# ===========================================================================


class TestCreateOrder:
    def test_total_and_price_snapshot(self, order_service, customer, product_a, product_b):
        order = order_service.create_order(
            _dto(customer.id, (product_a.id, 1), (product_b.id, 2))
        )

        assert order.status == OrderStatus.PENDING
        assert order.total == Decimal("200.00")
        prices = {item.product_id: item.price for item in order.items.all()}
        assert prices == {product_a.id: Decimal("100.00"), product_b.id: Decimal("50.00")}

    def test_later_price_change_does_not_affect_order(
        self, order_service, customer, product_a
    ):
        order = order_service.create_order(_dto(customer.id, (product_a.id, 2)))
        product_a.price = Decimal("1.00")
        product_a.save()

        fetched = order_service.get_order(order.id)
        assert fetched.total == Decimal("200.00")
        assert fetched.items.all()[0].price == Decimal("100.00")

    def test_does_not_touch_stock(self, order_service, customer, product_b):
        order_service.create_order(_dto(customer.id, (product_b.id, 10)))
        product_b.refresh_from_db()
        assert product_b.stock == 5

    def test_fractional_prices_sum_exactly(self, order_service, customer, make_product):
        p = make_product(price="0.10")
        q = make_product(price="0.20")
        order = order_service.create_order(_dto(customer.id, (p.id, 1), (q.id, 1)))
        assert order.total == Decimal("0.30")

    def test_duplicate_products_kept_as_separate_lines(
        self, order_service, customer, product_a
    ):
        order = order_service.create_order(
            _dto(customer.id, (product_a.id, 1), (product_a.id, 2))
        )
        assert [item.qty for item in order.items.all()] == [1, 2]
        assert order.total == Decimal("300.00")

    def test_unknown_customer(self, order_service, product_a):
        with pytest.raises(CustomerNotFound):
            order_service.create_order(_dto(999999, (product_a.id, 1)))
        assert Order.objects.count() == 0

    def test_unknown_product_persists_nothing(self, order_service, customer, product_a):
        with pytest.raises(ProductNotFound) as exc_info:
            order_service.create_order(
                _dto(customer.id, (product_a.id, 1), (999999, 1))
            )
        assert exc_info.value.id == 999999
        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_first_missing_product_in_request_order_is_reported(
        self, order_service, customer
    ):
        with pytest.raises(ProductNotFound) as exc_info:
            order_service.create_order(_dto(customer.id, (777777, 1), (888888, 1)))
        assert exc_info.value.id == 777777

    def test_bypassed_validation_still_rejected(self, order_service, customer, product_a):
        dto = CreateOrderDTO.model_construct(
            customer_id=customer.id,
            items=[CreateOrderItemDTO.model_construct(product_id=product_a.id, qty=0)],
        )
        with pytest.raises(InvalidOrderItems):
            order_service.create_order(dto)

    def test_empty_items_with_bypassed_validation(self, order_service, customer):
        dto = CreateOrderDTO.model_construct(customer_id=customer.id, items=[])
        with pytest.raises(InvalidOrderItems):
            order_service.create_order(dto)


# ===========================================================================
# confirm_order
# ===========================================================================


class TestConfirmOrder:
    def test_decrements_every_item(self, order_service, customer, product_a, product_b):
        order = order_service.create_order(
            _dto(customer.id, (product_a.id, 1), (product_b.id, 2))
        )

        confirmed = order_service.confirm_order(order.id)

        assert confirmed.status == OrderStatus.CONFIRMED
        product_a.refresh_from_db()
        product_b.refresh_from_db()
        assert product_a.stock == 9
        assert product_b.stock == 3

    def test_exact_stock_reaches_zero(self, order_service, customer, product_b):
        order = order_service.create_order(_dto(customer.id, (product_b.id, 5)))
        order_service.confirm_order(order.id)
        product_b.refresh_from_db()
        assert product_b.stock == 0

    def test_insufficient_stock_changes_nothing(
        self, order_service, customer, make_product
    ):
        a = make_product(stock=10, name="Alpha")
        b = make_product(stock=5, name="Beta")
        order = order_service.create_order(_dto(customer.id, (a.id, 2), (b.id, 100)))

        with pytest.raises(InsufficientStock) as exc_info:
            order_service.confirm_order(order.id)

        assert exc_info.value.product_name == "Beta"
        assert exc_info.value.available == 5
        assert exc_info.value.required == 100
        a.refresh_from_db()
        b.refresh_from_db()
        assert (a.stock, b.stock) == (10, 5)
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING

    def test_duplicate_lines_checked_against_combined_demand(
        self, order_service, customer, product_b
    ):
        # 3 + 3 > 5 even though each line fits on its own.
        order = order_service.create_order(
            _dto(customer.id, (product_b.id, 3), (product_b.id, 3))
        )
        with pytest.raises(InsufficientStock) as exc_info:
            order_service.confirm_order(order.id)
        assert exc_info.value.required == 6
        product_b.refresh_from_db()
        assert product_b.stock == 5

    def test_confirming_twice_is_rejected(self, order_service, customer, product_a):
        order = order_service.create_order(_dto(customer.id, (product_a.id, 1)))
        order_service.confirm_order(order.id)

        with pytest.raises(InvalidOrderStatus):
            order_service.confirm_order(order.id)

        product_a.refresh_from_db()
        assert product_a.stock == 9

    def test_unknown_order(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.confirm_order(999999)

    def test_stock_consumed_by_earlier_confirmation(
        self, order_service, customer, make_product
    ):
        product = make_product(stock=5)
        first = order_service.create_order(_dto(customer.id, (product.id, 3)))
        second = order_service.create_order(_dto(customer.id, (product.id, 3)))

        order_service.confirm_order(first.id)
        with pytest.raises(InsufficientStock) as exc_info:
            order_service.confirm_order(second.id)

        assert exc_info.value.available == 2
        product.refresh_from_db()
        assert product.stock == 2


# ===========================================================================
# queries
# ===========================================================================


class TestQueries:
    def test_get_order_not_found(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.get_order(424242)

    def test_list_orders_filters(self, order_service, customer, product_a):
        first = order_service.create_order(_dto(customer.id, (product_a.id, 1)))
        second = order_service.create_order(_dto(customer.id, (product_a.id, 1)))
        order_service.confirm_order(first.id)

        pending = order_service.list_orders({"status": OrderStatus.PENDING})
        assert [o.id for o in pending] == [second.id]
        assert [o.id for o in order_service.list_orders()] == [second.id, first.id]
