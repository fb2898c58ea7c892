"""
Tests for the Category tree.
"""

import pytest

from cafe_shared.utils.exceptions import InvalidArgumentError
from cafe_ordering.models import Category, Product


def _tree():
    drinks = Category(name="Drinks")
    hot = Category(name="Hot", display_order=1)
    cold = Category(name="Cold", display_order=2)
    drinks.add_subcategory(hot)
    drinks.add_subcategory(cold)
    return drinks, hot, cold


class TestCategoryTree:
    """Subcategories and cycle prevention."""

    def test_subtree_is_depth_first(self):
        drinks, hot, cold = _tree()
        tea = Category(name="Tea")
        hot.add_subcategory(tea)

        assert list(drinks.iter_subtree()) == [drinks, hot, tea, cold]

    def test_self_parenting_rejected(self):
        drinks, _, _ = _tree()
        with pytest.raises(InvalidArgumentError):
            drinks.add_subcategory(drinks)

    def test_ancestor_under_descendant_rejected(self):
        drinks, hot, _ = _tree()
        with pytest.raises(InvalidArgumentError):
            hot.add_subcategory(drinks)
        assert drinks not in hot.subcategories

    def test_adding_twice_is_idempotent(self):
        drinks, hot, _ = _tree()
        drinks.add_subcategory(hot)
        assert drinks.subcategories.count(hot) == 1

    def test_remove_subcategory(self):
        drinks, hot, _ = _tree()
        assert drinks.remove_subcategory(hot) is True
        assert drinks.remove_subcategory(hot) is False
        assert hot.parent is None

    def test_child_keeps_a_single_parent(self):
        drinks, hot, _ = _tree()
        food = Category(name="Food")

        with pytest.raises(InvalidArgumentError):
            food.add_subcategory(hot)

        assert hot.parent is drinks
        assert hot in drinks.subcategories
        assert food.subcategories == []
        assert hot.is_root is False

    def test_detached_child_can_be_reattached(self):
        drinks, hot, _ = _tree()
        food = Category(name="Food")

        drinks.remove_subcategory(hot)
        food.add_subcategory(hot)

        assert hot.parent is food
        assert hot not in drinks.subcategories

    def test_persisted_child_keeps_a_single_parent(self, db_session):
        drinks, hot, _ = _tree()
        food = Category(name="Food")
        db_session.add_all([drinks, food])
        db_session.commit()
        db_session.expire_all()

        with pytest.raises(InvalidArgumentError):
            food.add_subcategory(hot)

        assert food.subcategories == []
        assert hot.parent_id == drinks.id

    def test_is_root_follows_parent_id(self, db_session):
        drinks, hot, _ = _tree()
        db_session.add(drinks)
        db_session.flush()

        assert drinks.is_root is True
        assert hot.is_root is False
        assert hot.parent_id == drinks.id


class TestCategoryProducts:
    """Linked products and visibility."""

    def test_all_products_spans_subtree(self):
        drinks, hot, cold = _tree()
        water = Product(name="Water", price="1.00")
        latte = Product(name="Latte", price="4.00")
        iced = Product(name="Iced Tea", price="3.50")
        drinks.add_product(water)
        hot.add_product(latte)
        cold.add_product(iced)

        assert drinks.all_products() == [water, latte, iced]
        assert hot.all_products() == [latte]

    def test_active_products_and_visibility(self):
        drinks, _, _ = _tree()
        assert drinks.is_visible() is False

        retired = Product(name="Retired", price="1.00", is_active=False)
        drinks.add_product(retired)
        assert drinks.active_products() == []
        assert drinks.is_visible() is False

        latte = Product(name="Latte", price="4.00")
        drinks.add_product(latte)
        assert drinks.active_products() == [latte]
        assert drinks.is_visible() is True

        drinks.show_in_menu = False
        assert drinks.is_visible() is False

    def test_remove_product_unlinks(self):
        drinks, _, _ = _tree()
        latte = Product(name="Latte", price="4.00", category_id=1)
        drinks.add_product(latte)

        assert drinks.remove_product(latte) is True
        assert latte.category_id is None
        assert drinks.remove_product(latte) is False
