"""Product repository interface (Catalog Store contract).

Extends ``IRepository[Product]`` with the look-ups the order workflow
needs: batch lookup, row-locked lookup and a conditional stock decrement
that runs inside the caller's unit of work.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Sequence

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List products with optional filters."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU."""

    @abstractmethod
    def save(
        self, entity: Product, update_fields: Optional[Sequence[str]] = None
    ) -> Product:
        """Persist a product, optionally writing only *update_fields*."""

    @abstractmethod
    def get_for_update(self, id: int) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Must be called inside an open transaction.
        """

    @abstractmethod
    def get_many(self, ids: Iterable[int]) -> Dict[int, Product]:
        """Batch look-up: return ``{id: product}`` for the ids that exist."""

    @abstractmethod
    def get_many_for_update(self, ids: Iterable[int]) -> Dict[int, Product]:
        """Batch look-up with row-level locks (SELECT FOR UPDATE).

        Rows are locked in ascending primary-key order so that concurrent
        transactions touching overlapping products cannot deadlock.
        Must be called inside an open transaction.
        """

    @abstractmethod
    def decrement_stock(self, id: int, qty: int) -> bool:
        """Atomically subtract *qty* from stock if enough is available.

        Returns ``False`` (and changes nothing) when the product is
        missing or its current stock is below *qty*.
        """

    @abstractmethod
    def is_referenced_by_orders(self, id: int) -> bool:
        """Return ``True`` if any order item points at the product."""
