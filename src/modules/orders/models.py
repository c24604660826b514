"""Order and OrderItem models.

Business rules implemented:
- Orders are created ``PENDING``; the only transition is to ``CONFIRMED``
  (validated at service layer through ``can_transition_to``).
- ``total`` always equals the sum of ``qty * price`` over the items.
- Customer FK uses PROTECT: a customer with orders cannot be deleted.
- OrderItem snapshots the product price at creation time (``price``).
- Product FK uses PROTECT: a product referenced by items cannot be deleted.
- Orders are never deleted through the application.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import TERMINAL_STATES, VALID_TRANSITIONS, OrderStatus

CENTS = Decimal("0.01")


def quantize_money(value: Decimal) -> Decimal:
    """Round *value* to cents using ``ROUND_HALF_UP``."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


class Order(BaseModel):
    """Order aggregate root.

    The sequential integer ``id`` is the public identifier.  Items are
    reachable through the ``items`` reverse relation.
    """

    customer: models.ForeignKey = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    total: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total__gte=0),
                name="orders_total_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        allowed = VALID_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    def compute_total(self) -> Decimal:
        """Sum of ``qty * price`` over the (prefetched) items."""
        total = sum((item.line_total for item in self.items.all()), Decimal("0.00"))
        return quantize_money(total)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"Order #{self.id} ({self.status})"


class OrderItem(BaseModel):
    """Line item linking an Order to a Product.

    ``price`` is a **snapshot** of the product price at the time the
    order was created; it never changes when the product price is
    updated later.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    qty: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
    )
    price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(qty__gte=1),
                name="order_items_qty_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="order_items_price_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.qty is not None and self.qty < 1:
            raise ValidationError({"qty": "Quantity must be at least 1."})

    @property
    def line_total(self) -> Decimal:
        return quantize_money(self.price * self.qty)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.product} x{self.qty} (${self.line_total})"
