"""Order repository interface (Order Store contract).

Extends ``IRepository[Order]`` with the operations the workflow engine
needs: inserting an order together with its items, row-locked look-up
and status update.  All of them run inside the unit of work opened by
``OrderService`` (see ``modules.core.transactions``).

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes its OrderItem children.  Mutations must
    be atomic.
    """

    @abstractmethod
    def create(
        self,
        customer_id: int,
        items: List[Dict[str, Any]],
        total: Decimal,
    ) -> Order:
        """Insert a ``PENDING`` order and its items as one unit.

        ``items`` is a list of dicts with ``product_id``, ``qty`` and
        ``price`` (the snapshot price).
        """

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order with customer, items and products loaded."""

    @abstractmethod
    def get_for_update(self, id: int) -> Optional[Order]:
        """Retrieve an order holding a row-level lock until commit."""

    @abstractmethod
    def update_status(self, order: Order, status: str) -> Order:
        """Persist a new status for *order*."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Order]":
        """List hydrated orders, newest first, with optional filters."""
