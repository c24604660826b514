"""Customer model.

Business rules implemented:
- Email must be unique in the system (normalised to lowercase on save).
- A customer that owns orders cannot be deleted: ``Order.customer`` uses
  ``on_delete=PROTECT`` and ``CustomerService.delete_customer`` checks
  first so the caller gets a domain error instead of ``ProtectedError``.
"""

from __future__ import annotations

import structlog
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Customer(BaseModel):
    """Customer aggregate root."""

    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254, unique=True)

    class Meta:
        db_table = "customers"
        ordering = ["-id"]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"
