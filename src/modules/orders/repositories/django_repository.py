"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Writes do
not open their own transaction: they join the unit of work opened by the
service, so an order and its items are committed (or rolled back)
together with everything else the workflow did.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from django.db import models

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


def _hydrated() -> "models.QuerySet[Order]":
    return Order.objects.select_related("customer").prefetch_related(
        "items__product"
    )


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    def create(
        self,
        customer_id: int,
        items: List[Dict[str, Any]],
        total: Decimal,
    ) -> Order:
        order = Order(
            customer_id=customer_id,
            status=OrderStatus.PENDING,
            total=total,
        )
        order.save()

        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product_id=item["product_id"],
                    qty=item["qty"],
                    price=item["price"],
                )
                for item in items
            ]
        )

        logger.info("order.inserted", order_id=order.id, item_count=len(items))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Uses ``select_related`` for the customer FK (single JOIN) and
        ``prefetch_related`` for items and item products (separate
        batched queries).  Prevents N+1.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return _hydrated().filter(id=id).first()
        except (ValueError, TypeError):
            return None

    def get_for_update(self, id: int) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Only the order row is locked; items are prefetched by a separate
        query so the caller can iterate over them while holding the lock.
        Backends without row locking (SQLite) ignore the clause and rely
        on their database-wide write lock instead.
        """
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, TypeError):
            return None

    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Order]":
        """List orders with optional filters and eager-loaded relations.

        Supported filter keys:
        - ``status``
        - ``customer_id``
        """
        queryset = _hydrated().order_by("-created_at", "-id")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_status(self, order: Order, status: str) -> Order:
        old_status = order.status
        order.status = status
        order.save(update_fields=["status", "updated_at"])
        logger.info(
            "order.status_updated",
            order_id=order.id,
            old_status=old_status,
            new_status=status,
        )
        return order

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order."""
        entity.save()
        logger.info("order.saved", order_id=entity.id)
        return entity

    def delete(self, id: int) -> bool:
        """Orders are never deleted; always refuses."""
        logger.warning("order.delete_refused", order_id=id)
        return False
