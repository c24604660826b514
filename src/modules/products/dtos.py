"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator


def _normalize_sku(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("SKU must not be empty.")
    return v.strip().upper()


def _normalize_name(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Name must not be empty.")
    return v.strip()


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``sku`` and ``name`` are non-empty (trimmed; SKU uppercased).
    - ``price`` is a non-negative Decimal with at most two decimal places.
    - ``stock`` is non-negative.
    """

    model_config = ConfigDict(frozen=True)

    sku: str
    name: str
    price: Decimal
    stock: int = 0

    @field_validator("sku")
    @classmethod
    def sku_must_not_be_empty(cls, v: str) -> str:
        return _normalize_sku(v)

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        return _normalize_name(v)

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        if v.as_tuple().exponent < -2:
            raise ValueError("Price must have at most two decimal places.")
        return v

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock cannot be negative.")
        return v


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields will be updated.
    """

    model_config = ConfigDict(frozen=True)

    sku: str | None = None
    name: str | None = None
    price: Decimal | None = None
    stock: int | None = None

    @field_validator("sku")
    @classmethod
    def sku_must_not_be_empty(cls, v: str | None) -> str | None:
        return _normalize_sku(v) if v is not None else None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str | None) -> str | None:
        return _normalize_name(v) if v is not None else None

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("Stock cannot be negative.")
        return v
