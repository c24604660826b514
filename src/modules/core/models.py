"""Base abstract model for the order management system.

Provides:
- ``BaseModel``: integer auto PK + created_at / updated_at timestamps.

Design decisions:
- Integer primary keys (``BigAutoField``) are exposed directly to API
  clients as ``id`` / ``customerId`` / ``productId``.
- ``save()`` guard ensures ``updated_at`` is included when ``update_fields``
  is specified (Django skips ``auto_now`` fields otherwise).
- No soft delete: orders are never deleted and customer/product deletion
  is guarded by ``on_delete=PROTECT`` plus explicit service checks.
"""

from __future__ import annotations

from django.db import models

# ---------------------------------------------------------------------------
# BaseModel
# ---------------------------------------------------------------------------


class BaseModel(models.Model):
    """Abstract base with timestamp bookkeeping."""

    id = models.BigAutoField(primary_key=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        """Ensure ``updated_at`` is refreshed even when ``update_fields`` is passed."""
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)
