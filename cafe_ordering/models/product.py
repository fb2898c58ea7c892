"""
Product Model: menu item aggregating ingredients, stock and dietary flags.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    Boolean, CheckConstraint, Column, ForeignKey, Integer, Numeric, String, Table, Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cafe_shared.utils.exceptions import InvalidArgumentError
from cafe_shared.utils.money import ZERO, require_non_negative, require_positive_int

from .base import AuditMixin, Base, IdType
from .ingredient import Ingredient


# Many-to-many link between products and ingredients.
# Ingredients never reference products back; use ProductRepository.find_by_ingredient.
product_ingredients = Table(
    "product_ingredients",
    Base.metadata,
    Column("product_id", ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
    Column("ingredient_id", ForeignKey("ingredients.id", ondelete="RESTRICT"), primary_key=True),
)


class Product(AuditMixin, Base):
    """
    Product (menu item) that can be ordered.

    Dietary flags are derived from the ingredient set:
    - contains_allergens is refreshed on every add_ingredient/remove_ingredient
    - is_vegetarian/is_vegan/is_gluten_free are only refreshed by an explicit
      calculate_dietary_attributes() call
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    category_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("categories.id", ondelete="SET NULL"), index=True
    )
    barcode: Mapped[Optional[str]] = mapped_column(String(50), unique=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(255))
    preparation_time_minutes: Mapped[Optional[int]] = mapped_column(Integer)
    calories: Mapped[Optional[int]] = mapped_column(Integer)

    # Inventory
    stock_level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    reorder_threshold: Mapped[Optional[int]] = mapped_column(Integer)

    # Derived dietary flags (never set directly by callers)
    contains_allergens: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_vegetarian: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_vegan: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_gluten_free: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    ingredients: Mapped[set["Ingredient"]] = relationship(
        secondary=product_ingredients, collection_class=set, lazy="selectin"
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_product_price_non_negative"),
        CheckConstraint("stock_level >= 0", name="chk_product_stock_non_negative"),
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs["price"] = require_non_negative(kwargs.get("price", ZERO), "price")
        kwargs.setdefault("is_active", True)
        kwargs.setdefault("stock_level", 0)
        if kwargs["stock_level"] < 0:
            raise InvalidArgumentError("Stock level cannot be negative", field="stock_level")
        kwargs.setdefault("contains_allergens", False)
        kwargs.setdefault("is_vegetarian", False)
        kwargs.setdefault("is_vegan", False)
        kwargs.setdefault("is_gluten_free", False)
        super().__init__(**kwargs)

    # =========================================================================
    # Ingredients and dietary attributes
    # =========================================================================

    def add_ingredient(self, ingredient: Ingredient) -> None:
        """Link an ingredient and refresh the allergen flag."""
        if ingredient is None:
            raise InvalidArgumentError("Ingredient cannot be None")
        self.ingredients.add(ingredient)
        self._refresh_allergen_flag()

    def remove_ingredient(self, ingredient: Ingredient) -> bool:
        """Unlink an ingredient and refresh the allergen flag."""
        if ingredient not in self.ingredients:
            return False
        self.ingredients.discard(ingredient)
        self._refresh_allergen_flag()
        return True

    def _refresh_allergen_flag(self) -> None:
        self.contains_allergens = any(i.is_allergen for i in self.ingredients)

    def calculate_dietary_attributes(self) -> None:
        """
        Recompute vegetarian/vegan/gluten-free from the current ingredients.

        A flag holds only if every ingredient satisfies it, so a product with
        no ingredients is vegetarian, vegan and gluten-free.
        """
        self.is_vegetarian = all(i.is_vegetarian for i in self.ingredients)
        self.is_vegan = all(i.is_vegan for i in self.ingredients)
        self.is_gluten_free = all(i.is_gluten_free for i in self.ingredients)

    def allergen_types(self) -> list[str]:
        """Distinct allergen types of the current ingredients, sorted."""
        return sorted({
            i.allergen_type for i in self.ingredients
            if i.is_allergen and i.allergen_type
        })

    # =========================================================================
    # Stock ledger
    # =========================================================================

    def restock_product(self, quantity: int) -> int:
        """Add units to stock. Returns the new stock level."""
        require_positive_int(quantity, "quantity")
        self.stock_level = (self.stock_level or 0) + quantity
        return self.stock_level

    def reduce_stock(self, quantity: int) -> int:
        """Remove units from stock. Returns the new stock level."""
        require_positive_int(quantity, "quantity")
        current = self.stock_level or 0
        if quantity > current:
            raise InvalidArgumentError(
                f"Insufficient stock for product '{self.name}'",
                product_id=self.id,
                requested=quantity,
                available=current,
            )
        self.stock_level = current - quantity
        return self.stock_level

    def needs_reordering(self) -> bool:
        return self.reorder_threshold is not None and (self.stock_level or 0) <= self.reorder_threshold

    def is_available(self) -> bool:
        """Active, and in stock when stock is being tracked (threshold configured)."""
        if not self.is_active:
            return False
        return self.reorder_threshold is None or (self.stock_level or 0) > 0

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', price={self.price}, category_id={self.category_id})>"
