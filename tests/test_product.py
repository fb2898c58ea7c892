"""
Tests for Product: dietary derivation and the unit stock ledger.
"""

from decimal import Decimal

import pytest

from cafe_shared.utils.exceptions import InvalidArgumentError
from cafe_ordering.models import Ingredient, Product


class TestDietaryAttributes:
    """Allergen flag follows the ingredient set; the other flags need an explicit refresh."""

    def test_allergen_flag_updates_on_add_and_remove(self, coffee, milk):
        coffee.add_ingredient(milk)
        assert coffee.contains_allergens is True

        assert coffee.remove_ingredient(milk) is True
        assert coffee.contains_allergens is False

    def test_dietary_flags_wait_for_explicit_recalculation(self, coffee, milk):
        coffee.add_ingredient(milk)

        assert coffee.is_vegetarian is False
        assert coffee.is_gluten_free is False

        coffee.calculate_dietary_attributes()

        assert coffee.is_vegetarian is True
        assert coffee.is_vegan is False
        assert coffee.is_gluten_free is True

    def test_removing_ingredient_leaves_dietary_flags_alone(self, coffee, milk, oat_milk):
        coffee.add_ingredient(milk)
        coffee.add_ingredient(oat_milk)
        coffee.calculate_dietary_attributes()
        assert coffee.is_gluten_free is False

        coffee.remove_ingredient(oat_milk)

        assert coffee.is_vegetarian is True
        assert coffee.is_vegan is False
        assert coffee.is_gluten_free is False

        coffee.calculate_dietary_attributes()
        assert coffee.is_gluten_free is True

    def test_flags_require_every_ingredient(self, coffee, milk, oat_milk):
        coffee.add_ingredient(milk)
        coffee.add_ingredient(oat_milk)
        coffee.calculate_dietary_attributes()

        assert coffee.is_vegetarian is True
        assert coffee.is_vegan is False  # milk
        assert coffee.is_gluten_free is False  # oat milk

    def test_no_ingredients_is_vacuously_compliant(self, coffee):
        coffee.calculate_dietary_attributes()

        assert coffee.is_vegetarian is True
        assert coffee.is_vegan is True
        assert coffee.is_gluten_free is True

    def test_remove_unknown_ingredient_returns_false(self, coffee, milk):
        assert coffee.remove_ingredient(milk) is False

    def test_adding_same_ingredient_twice_keeps_one_link(self, coffee, milk):
        coffee.add_ingredient(milk)
        coffee.add_ingredient(milk)
        assert len(coffee.ingredients) == 1

    def test_allergen_types(self, coffee, milk, oat_milk):
        nuts = Ingredient(name="Hazelnut Syrup", is_allergen=True, allergen_type="nuts")
        for ingredient in (milk, oat_milk, nuts):
            coffee.add_ingredient(ingredient)

        assert coffee.allergen_types() == ["dairy", "nuts"]

    def test_add_none_rejected(self, coffee):
        with pytest.raises(InvalidArgumentError):
            coffee.add_ingredient(None)


class TestProductStock:
    """restock_product / reduce_stock."""

    def test_restock_then_reduce(self):
        product = Product(name="Croissant", price="2.80", stock_level=4)

        assert product.restock_product(6) == 10
        assert product.reduce_stock(6) == 4

    def test_reduce_more_than_available(self):
        product = Product(name="Croissant", price="2.80", stock_level=2)

        with pytest.raises(InvalidArgumentError):
            product.reduce_stock(3)

        assert product.stock_level == 2

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantities_rejected(self, quantity):
        product = Product(name="Croissant", price="2.80", stock_level=2)
        with pytest.raises(InvalidArgumentError):
            product.restock_product(quantity)
        with pytest.raises(InvalidArgumentError):
            product.reduce_stock(quantity)

    def test_needs_reordering(self):
        product = Product(name="Croissant", price="2.80", stock_level=5, reorder_threshold=5)
        assert product.needs_reordering() is True
        product.restock_product(1)
        assert product.needs_reordering() is False

    def test_availability(self):
        untracked = Product(name="Espresso", price="2.00")
        assert untracked.is_available() is True

        tracked = Product(name="Muffin", price="3.00", stock_level=0, reorder_threshold=2)
        assert tracked.is_available() is False

        inactive = Product(name="Old Blend", price="3.00", is_active=False)
        assert inactive.is_available() is False

    def test_negative_price_rejected(self):
        with pytest.raises(InvalidArgumentError):
            Product(name="Bad", price="-1")

    def test_price_converted_to_decimal(self):
        assert Product(name="Tea", price=3.2).price == Decimal("3.2")
