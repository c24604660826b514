"""Customer API views.

Exposes the ``CustomerService`` via HTTP using DRF ViewSets.
Domain exceptions propagate to ``modules.core.exception_handler``,
which translates them into HTTP status codes.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
from modules.customers.filters import CustomerFilter
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import CustomerSerializer
from modules.customers.services import CustomerService


class CustomerViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Customer CRUD operations.

    Uses ``CustomerService`` with ``CustomerDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    filterset_class = CustomerFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = StandardResultsSetPagination
    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    lookup_value_regex = r"\d+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(repository=CustomerDjangoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_customers()

    def retrieve(self, request: Request, pk: str) -> Response:
        """GET /api/v1/customers/{pk}/"""
        customer = self._service.get_customer(int(pk))
        return Response(CustomerSerializer(customer).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/customers/"""
        data = request.data
        dto = CreateCustomerDTO(
            name=data.get("name", ""),
            email=data.get("email", ""),
        )
        customer = self._service.create_customer(dto)
        return Response(
            CustomerSerializer(customer).data, status=status.HTTP_201_CREATED
        )

    def update(self, request: Request, pk: str) -> Response:
        """PUT/PATCH /api/v1/customers/{pk}/"""
        data = request.data
        dto = UpdateCustomerDTO(name=data.get("name"), email=data.get("email"))
        customer = self._service.update_customer(int(pk), dto)
        return Response(CustomerSerializer(customer).data)

    def partial_update(self, request: Request, pk: str) -> Response:
        """PATCH /api/v1/customers/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str) -> Response:
        """DELETE /api/v1/customers/{pk}/"""
        self._service.delete_customer(int(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)
