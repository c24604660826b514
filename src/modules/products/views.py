"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
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
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService


class ProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = StandardResultsSetPagination
    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    lookup_value_regex = r"\d+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_products()

    def retrieve(self, request: Request, pk: str) -> Response:
        """GET /api/v1/products/{pk}/"""
        product = self._service.get_product(int(pk))
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        data = request.data
        dto = CreateProductDTO(
            sku=data.get("sku", ""),
            name=data.get("name", ""),
            price=data.get("price"),
            stock=data.get("stock", 0),
        )
        product = self._service.create_product(dto)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/"""
        data = request.data
        dto = UpdateProductDTO(
            sku=data.get("sku"),
            name=data.get("name"),
            price=data.get("price"),
            stock=data.get("stock"),
        )
        product = self._service.update_product(int(pk), dto)
        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        self._service.delete_product(int(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)
