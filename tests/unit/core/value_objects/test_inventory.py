"""
Tests unitaires pour l'objet valeur Inventory (0 <= reserved <= quantity).
"""

import pytest

from orderflow.core.errors import InsufficientStockError, ValidationError
from orderflow.core.value_objects.inventory import Inventory


class TestInventoryInvariant:
    def test_available_is_quantity_minus_reserved(self) -> None:
        assert Inventory(10, 3).available == 7

    def test_reserved_above_quantity_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Inventory(2, 3)

    def test_negative_values_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Inventory(-1)
        with pytest.raises(ValidationError):
            Inventory(1, -1)


class TestInventoryOperations:
    def test_reserve_returns_new_instance(self) -> None:
        inventory = Inventory(5)
        reserved = inventory.reserve(2)
        assert reserved == Inventory(5, 2)
        assert inventory == Inventory(5, 0)

    def test_reserve_more_than_available_raises(self) -> None:
        with pytest.raises(InsufficientStockError) as exc_info:
            Inventory(5, 4).reserve(2, "p1")
        error = exc_info.value
        assert (error.product_id, error.requested, error.available) == ("p1", 2, 1)

    def test_release_and_consume(self) -> None:
        inventory = Inventory(5, 3)
        assert inventory.release(2) == Inventory(5, 1)
        assert inventory.consume(3) == Inventory(2, 0)

    def test_release_more_than_reserved_raises(self) -> None:
        with pytest.raises(ValidationError):
            Inventory(5, 1).release(2)

    def test_consume_more_than_reserved_raises(self) -> None:
        with pytest.raises(ValidationError):
            Inventory(5, 1).consume(2)

    def test_restock(self) -> None:
        assert Inventory(1, 1).restock(4) == Inventory(5, 1)

    @pytest.mark.parametrize("count", [0, -2])
    def test_non_positive_counts_are_rejected(self, count: int) -> None:
        with pytest.raises(ValidationError):
            Inventory(5).reserve(count)
