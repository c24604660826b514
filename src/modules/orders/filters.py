import django_filters

from modules.orders.constants import OrderStatus
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    customerId = django_filters.NumberFilter(  # noqa: N815
        field_name="customer_id", min_value=1
    )

    class Meta:
        model = Order
        fields = ["status", "customerId"]
