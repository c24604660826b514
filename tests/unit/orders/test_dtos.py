"""Unit tests for Order DTOs."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO

pytestmark = pytest.mark.unit


class TestCreateOrderItemDTO:
    def test_valid(self):
        item = CreateOrderItemDTO(product_id=1, qty=2)
        assert item.product_id == 1
        assert item.qty == 2

    @pytest.mark.parametrize("qty", [0, -1])
    def test_non_positive_qty_rejected(self, qty):
        with pytest.raises(ValidationError):
            CreateOrderItemDTO(product_id=1, qty=qty)


class TestCreateOrderDTO:
    def test_valid(self):
        dto = CreateOrderDTO(
            customer_id=1,
            items=[{"product_id": 1, "qty": 1}, {"product_id": 2, "qty": 3}],
        )
        assert len(dto.items) == 2
        assert isinstance(dto.items[0], CreateOrderItemDTO)

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO(customer_id=1, items=[])

    def test_duplicate_products_allowed(self):
        dto = CreateOrderDTO(
            customer_id=1,
            items=[{"product_id": 1, "qty": 1}, {"product_id": 1, "qty": 2}],
        )
        assert [item.qty for item in dto.items] == [1, 2]

    def test_frozen(self):
        dto = CreateOrderDTO(customer_id=1, items=[{"product_id": 1, "qty": 1}])
        with pytest.raises(ValidationError):
            dto.customer_id = 2
