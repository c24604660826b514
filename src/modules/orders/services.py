"""Order service layer (Use Cases).

Orchestrates the order workflow: creation with a price snapshot and
confirmation with an all-or-nothing stock decrement.  Each command runs
in exactly one unit of work (``modules.core.transactions``); every
repository call joins it, and any exception rolls the whole operation
back.

Business rules enforced:
- The customer and every referenced product must exist at creation.
- Item prices are snapshotted; ``total`` is the sum of ``qty * price``.
- Creation never touches stock.
- Only ``PENDING`` orders can be confirmed.
- Stock for every item is validated before any of it is decremented.
- Order and product rows are locked for the duration of a confirmation;
  products in ascending id order so overlapping confirmations cannot
  deadlock.
"""

from __future__ import annotations

from collections import Counter
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import models

from modules.core.transactions import retry_on_conflict, unit_of_work
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import (
    CustomerNotFound,
    InsufficientStock,
    InvalidOrderItems,
    InvalidOrderStatus,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.models import quantize_money

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create a ``PENDING`` order with snapshotted item prices.

        Steps:
        1. Validate the customer exists.
        2. Load every referenced product in one batch.
        3. Snapshot each product's current price and compute the total.
        4. Persist order + items.

        Stock is not checked or reserved here; see ``confirm_order``.

        Raises:
            InvalidOrderItems: no items, or an item quantity below 1.
            CustomerNotFound: customer does not exist.
            ProductNotFound: the first missing product, in request order.
        """
        if not dto.items:
            raise InvalidOrderItems("Order must have at least one item.")
        for item in dto.items:
            if item.qty < 1:
                raise InvalidOrderItems(
                    f"Quantity for product {item.product_id} must be at least 1."
                )

        log = logger.bind(customer_id=dto.customer_id, item_count=len(dto.items))
        log.info("order.creation_started")

        with unit_of_work():
            # 1. Validate customer
            if not self._customer_repo.exists(dto.customer_id):
                raise CustomerNotFound(dto.customer_id)

            # 2. Batch product lookup
            products = self._product_repo.get_many(
                item.product_id for item in dto.items
            )

            # 3. Snapshot prices
            total = Decimal("0.00")
            repo_items = []
            for item in dto.items:
                product = products.get(item.product_id)
                if product is None:
                    log.warning("order.product_missing", product_id=item.product_id)
                    raise ProductNotFound(item.product_id)
                repo_items.append(
                    {
                        "product_id": product.id,
                        "qty": item.qty,
                        "price": product.price,
                    }
                )
                total += product.price * item.qty

            # 4. Persist order + items
            order = self._order_repo.create(
                customer_id=dto.customer_id,
                items=repo_items,
                total=quantize_money(total),
            )

        log.info("order.created", order_id=order.id, total=str(order.total))
        return self._order_repo.get_by_id(order.id) or order

    @retry_on_conflict()
    def confirm_order(self, order_id: int) -> Order:
        """Confirm a ``PENDING`` order and decrement stock for every item.

        Runs in two passes inside one unit of work:

        1. Lock the order, check its status, lock the products and verify
           that each has enough stock for the order's total demand on it.
           A shortfall aborts before anything is written.
        2. Decrement every item with a conditional update, then mark the
           order ``CONFIRMED``.

        The conditional update re-checks stock in the database, so a
        concurrent confirmation that slipped past pass 1 (backends
        without row locking) still cannot drive stock negative.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: order is not ``PENDING``.
            ProductNotFound: an item's product no longer exists.
            InsufficientStock: stock is short for at least one product.
        """
        log = logger.bind(order_id=order_id)

        with unit_of_work():
            order = self._order_repo.get_for_update(order_id)
            if not order:
                raise OrderNotFound(order_id)

            if not order.can_transition_to(OrderStatus.CONFIRMED):
                log.warning("order.invalid_transition", current_status=order.status)
                raise InvalidOrderStatus(
                    f"Order {order_id} cannot be confirmed from status {order.status}."
                )

            items = list(order.items.all())
            demand: Counter = Counter()
            for item in items:
                demand[item.product_id] += item.qty

            # Pass 1: validate every item before touching stock.
            products = self._product_repo.get_many_for_update(demand.keys())
            for item in items:
                product = products.get(item.product_id)
                if product is None:
                    raise ProductNotFound(item.product_id)
                required = demand[item.product_id]
                if product.stock < required:
                    log.warning(
                        "order.insufficient_stock",
                        product_id=product.id,
                        available=product.stock,
                        required=required,
                    )
                    raise InsufficientStock(product.name, product.stock, required)

            # Pass 2: apply.
            for item in items:
                if not self._product_repo.decrement_stock(item.product_id, item.qty):
                    product = self._product_repo.get_by_id(item.product_id)
                    available = product.stock if product else 0
                    name = product.name if product else str(item.product_id)
                    log.warning(
                        "order.insufficient_stock",
                        product_id=item.product_id,
                        available=available,
                        required=item.qty,
                    )
                    raise InsufficientStock(name, available, item.qty)
                log.info(
                    "order.stock_decremented",
                    product_id=item.product_id,
                    quantity=item.qty,
                )

            self._order_repo.update_status(order, OrderStatus.CONFIRMED)

        log.info("order.confirmed")
        return self._order_repo.get_by_id(order_id) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: int) -> Order:
        """Retrieve a single hydrated order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order

    def list_orders(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Order]":
        """Return hydrated orders, newest first, optionally filtered."""
        return self._order_repo.list(filters)
