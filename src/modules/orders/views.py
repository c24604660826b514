"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions propagate to ``modules.core.exception_handler``,
which translates them into HTTP status codes.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import CreateOrderSerializer, OrderSerializer
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


class OrderViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = StandardResultsSetPagination
    lookup_value_regex = r"\d+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Throttling scopes per action."""
        throttle_scope: str | None
        if self.action in {"create", "confirm"}:
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        data = create_serializer.validated_data
        dto = CreateOrderDTO(
            customer_id=data["customer_id"],
            items=[
                CreateOrderItemDTO(product_id=item["product_id"], qty=item["qty"])
                for item in data["items"]
            ],
        )
        order = self._service.create_order(dto)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        """Newest first; ``status`` / ``customerId`` applied by ``OrderFilter``."""
        return self._service.list_orders()

    def retrieve(self, request: Request, pk: str) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(int(pk))
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Confirm (dedicated action)
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def confirm(self, request: Request, pk: str) -> Response:
        """POST /api/v1/orders/{pk}/confirm/

        Decrements stock for every item and marks the order ``CONFIRMED``.
        """
        order = self._service.confirm_order(int(pk))
        return Response(OrderSerializer(order).data)
