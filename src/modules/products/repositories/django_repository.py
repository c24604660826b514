"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
(or ``False``) instead of raising; the Service Layer decides how to
translate a missing entity into a domain error.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence

import structlog
from django.db import models
from django.db.models import F
from django.utils import timezone

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, TypeError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[Product]":
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"name__icontains": "laptop"}
            {"price__gte": Decimal("100.00")}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def save(
        self, entity: Product, update_fields: Optional[Sequence[str]] = None
    ) -> Product:
        """Persist a product.

        With *update_fields* only those columns are written, so columns
        changed concurrently by another transaction (``stock``) are left
        alone.
        """
        entity.save(update_fields=update_fields)
        logger.info(
            "product.saved",
            product_id=entity.id,
            sku=entity.sku,
        )
        return entity

    def delete(self, id: int) -> bool:
        """Delete a product by ID.

        Returns ``True`` if the product was found and deleted,
        ``False`` if no product exists with the given ID.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.deleted", product_id=id)
        return True

    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU (case-insensitive via upper normalisation)."""
        return Product.objects.filter(sku=Product.normalize_sku(sku)).first()

    # ------------------------------------------------------------------
    # Order workflow support
    # ------------------------------------------------------------------

    def get_many(self, ids: Iterable[int]) -> Dict[int, Product]:
        """Single ``IN`` query; duplicates in *ids* are collapsed."""
        return Product.objects.in_bulk(set(ids))

    def get_for_update(self, id: int) -> Optional[Product]:
        try:
            return Product.objects.select_for_update().filter(id=id).first()
        except (ValueError, TypeError):
            return None

    def get_many_for_update(self, ids: Iterable[int]) -> Dict[int, Product]:
        products = (
            Product.objects.select_for_update()
            .filter(id__in=set(ids))
            .order_by("id")
        )
        return {product.id: product for product in products}

    def decrement_stock(self, id: int, qty: int) -> bool:
        """Conditional ``UPDATE ... SET stock = stock - qty WHERE stock >= qty``.

        The guard is evaluated by the database against the current row,
        so it holds even on backends without ``SELECT FOR UPDATE``.
        """
        updated = Product.objects.filter(id=id, stock__gte=qty).update(
            stock=F("stock") - qty, updated_at=timezone.now()
        )
        if updated:
            logger.info("product.stock_decremented", product_id=id, quantity=qty)
        return bool(updated)

    def is_referenced_by_orders(self, id: int) -> bool:
        return Product.objects.filter(id=id, order_items__isnull=False).exists()
