"""Order domain constants.

Defines status choices and valid status transitions for the order
state machine.  ``PENDING -> CONFIRMED`` is the only transition; a
confirmed order is final.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    CONFIRMED = "CONFIRMED", "Confirmed"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED},
    OrderStatus.CONFIRMED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.CONFIRMED}
