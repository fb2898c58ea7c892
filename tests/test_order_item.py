"""
Tests for OrderItem pricing and discounts.
"""

from decimal import Decimal

import pytest

from cafe_shared.utils.exceptions import InvalidArgumentError
from cafe_ordering.models import OrderItem


def _item(unit_price="5.00", quantity=2):
    return OrderItem(product_id=1, quantity=quantity, unit_price=Decimal(unit_price))


class TestOrderItemPricing:
    """subtotal = unit_price × quantity - discount."""

    def test_subtotal_without_discount(self):
        item = _item("4.50", 2)
        assert item.base_amount == Decimal("9.00")
        assert item.subtotal == Decimal("9.00")

    def test_percentage_discount(self):
        item = _item("5.00", 2)

        discount = item.apply_percentage_discount(15, "happy hour")

        assert discount == Decimal("1.50")
        assert item.subtotal == Decimal("8.50")
        assert item.discount_reason == "happy hour"

    def test_fixed_discount_over_base_is_rejected(self):
        item = _item("5.00", 2)

        with pytest.raises(InvalidArgumentError):
            item.apply_fixed_discount(Decimal("15"), "too generous")

        assert item.discount_amount == Decimal("0")
        assert item.discount_reason is None

    def test_fixed_discount_equal_to_base_is_allowed(self):
        item = _item("5.00", 2)
        item.apply_fixed_discount(Decimal("10"), "on the house")
        assert item.subtotal == Decimal("0")

    def test_negative_fixed_discount_rejected(self):
        with pytest.raises(InvalidArgumentError):
            _item().apply_fixed_discount(-1, None)

    @pytest.mark.parametrize("pct", [0, 101])
    def test_percentage_bounds(self, pct):
        with pytest.raises(InvalidArgumentError):
            _item().apply_percentage_discount(pct, None)

    def test_remove_discount(self):
        item = _item()
        item.apply_fixed_discount(2, "promo")
        item.remove_discount()
        assert item.discount_amount == Decimal("0")
        assert item.discount_reason is None
        assert item.subtotal == item.base_amount


class TestOrderItemQuantity:
    """change_quantity and preparation."""

    def test_change_quantity_keeps_discount_that_still_fits(self):
        item = _item("5.00", 3)
        item.apply_fixed_discount(4, "promo")

        item.change_quantity(1)

        assert item.discount_amount == Decimal("4")
        assert item.subtotal == Decimal("1.00")

    def test_change_quantity_clamps_discount_to_new_base(self):
        item = _item("5.00", 3)
        item.apply_fixed_discount(12, "promo")

        item.change_quantity(2)

        assert item.discount_amount == Decimal("10.00")
        assert item.subtotal == Decimal("0")

    def test_change_quantity_rejects_non_positive(self):
        with pytest.raises(InvalidArgumentError):
            _item().change_quantity(0)

    def test_mark_as_prepared(self):
        item = _item()
        assert item.is_prepared is False
        item.mark_as_prepared()
        item.mark_as_prepared()
        assert item.is_prepared is True
