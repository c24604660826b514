"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Business rules enforced here:
- SKU must be unique (checked up-front, and again by the UNIQUE index).
- Price / stock non-negative (validated by DTO and DB constraints).
- A product referenced by order items cannot be deleted.
- Updates lock the row and write only the supplied columns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import IntegrityError, models, transaction

from modules.products.exceptions import (
    ProductAlreadyExists,
    ProductInUse,
    ProductNotFound,
)
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product after enforcing SKU uniqueness.

        Raises:
            ProductAlreadyExists: if SKU is already taken.
        """
        log = logger.bind(sku=dto.sku)

        if self._repo.get_by_sku(dto.sku):
            log.warning("product.duplicate_sku")
            raise ProductAlreadyExists(f"SKU '{dto.sku}' already registered.")

        product = Product(
            sku=dto.sku,
            name=dto.name,
            price=dto.price,
            stock=dto.stock,
        )
        product = self._save_unique(product)
        log.info("product.created", product_id=product.id)
        return product

    @transaction.atomic
    def update_product(self, id: int, dto: UpdateProductDTO) -> Product:
        """Update an existing product with the supplied fields.

        The row is locked for the rest of the transaction and only the
        supplied columns are written, so a stock decrement committed by a
        concurrent order confirmation is never overwritten.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductAlreadyExists: if the new SKU belongs to another product.
        """
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(id)

        log = logger.bind(product_id=id)

        if dto.sku is not None and dto.sku != product.sku:
            existing = self._repo.get_by_sku(dto.sku)
            if existing and existing.id != product.id:
                log.warning("product.duplicate_sku", sku=dto.sku)
                raise ProductAlreadyExists(f"SKU '{dto.sku}' already registered.")

        changed = []
        for field in ("sku", "name", "price", "stock"):
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)
                changed.append(field)

        if changed:
            product = self._save_unique(product, update_fields=changed)
        log.info("product.updated", fields=changed)
        return product

    @transaction.atomic
    def delete_product(self, id: int) -> None:
        """Delete a product that no order references.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductInUse: if order items reference the product.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(id)
        if self._repo.is_referenced_by_orders(id):
            logger.warning("product.delete_blocked", product_id=id)
            raise ProductInUse(f"Product {id} is referenced by existing orders.")
        self._repo.delete(id)
        logger.info("product.deleted", product_id=id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """Return products, optionally filtered."""
        return self._repo.list(filters)

    def get_product(self, id: int) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(id)
        return product

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _save_unique(
        self, product: Product, update_fields: Optional[List[str]] = None
    ) -> Product:
        # A concurrent insert can still win the race for the SKU.
        try:
            with transaction.atomic():
                if update_fields is None:
                    return self._repo.save(product)
                return self._repo.save(product, update_fields=update_fields)
        except IntegrityError as exc:
            existing = self._repo.get_by_sku(product.sku)
            if existing is None or existing.id == product.id:
                raise
            raise ProductAlreadyExists(
                f"SKU '{product.sku}' already registered."
            ) from exc
