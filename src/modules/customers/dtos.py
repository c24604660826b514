"""Customer DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Views)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateCustomerDTO``: input for customer creation.
- ``UpdateCustomerDTO``: input for partial customer updates.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


def _normalize_name(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Name must not be empty.")
    return v.strip()


class CreateCustomerDTO(BaseModel):
    """Immutable DTO for customer creation requests.

    Validates:
    - ``name`` is non-empty (trimmed).
    - ``email`` is a well-formed address (Pydantic ``EmailStr``),
      normalised to lowercase.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    email: EmailStr

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        return _normalize_name(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class UpdateCustomerDTO(BaseModel):
    """Immutable DTO for customer update requests.

    All fields are optional; only supplied fields will be updated.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    email: EmailStr | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str | None) -> str | None:
        return _normalize_name(v) if v is not None else None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str | None) -> str | None:
        return v.lower() if v is not None else None
