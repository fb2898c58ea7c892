"""
Ingredient Model: inventory unit with stock, dietary and allergen flags.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, Enum as SQLEnum, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cafe_shared.config.constants import UnitOfMeasure
from cafe_shared.utils.exceptions import InvalidArgumentError
from cafe_shared.utils.money import ZERO, require_places, require_positive, round_money, to_decimal

from .base import AuditMixin, Base, IdType, utcnow

# Scale of the stock_level and reorder_threshold columns
STOCK_PLACES = 3


class Ingredient(AuditMixin, Base):
    """
    Ingredient catalog entry with its own stock ledger.
    Tracked for allergen information, dietary restrictions,
    inventory management and cost analysis.
    """

    __tablename__ = "ingredients"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text)

    # Allergen and dietary information
    is_allergen: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    allergen_type: Mapped[Optional[str]] = mapped_column(String(50))  # "nuts", "dairy", ...
    is_vegetarian: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_vegan: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_gluten_free: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Inventory
    stock_level: Mapped[Decimal] = mapped_column(Numeric(12, 3), default=ZERO, nullable=False)
    reorder_threshold: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 3))
    unit_of_measure: Mapped[UnitOfMeasure] = mapped_column(
        SQLEnum(UnitOfMeasure, name="unit_of_measure"),
        default=UnitOfMeasure.GRAM,
        nullable=False,
    )
    cost_per_unit: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    supplier: Mapped[Optional[str]] = mapped_column(String(100))
    last_restocked: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        CheckConstraint("stock_level >= 0", name="chk_ingredient_stock_non_negative"),
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("is_allergen", False)
        kwargs.setdefault("is_vegetarian", True)
        kwargs.setdefault("is_vegan", False)
        kwargs.setdefault("is_gluten_free", True)
        kwargs.setdefault("unit_of_measure", UnitOfMeasure.GRAM)
        kwargs["stock_level"] = require_places(
            to_decimal(kwargs.get("stock_level", ZERO), "stock_level"), STOCK_PLACES, "stock_level"
        )
        if kwargs["stock_level"] < ZERO:
            raise InvalidArgumentError("Stock level cannot be negative", field="stock_level")
        for field in ("reorder_threshold", "cost_per_unit"):
            if kwargs.get(field) is not None:
                kwargs[field] = to_decimal(kwargs[field], field)
        super().__init__(**kwargs)

    # =========================================================================
    # Stock ledger
    # =========================================================================

    def add_stock(self, amount: Decimal | int | str) -> Decimal:
        """
        Receive stock. Stamps last_restocked.

        Returns:
            The new stock level.
        """
        quantity = require_places(require_positive(amount, "amount"), STOCK_PLACES, "amount")
        self.stock_level = (self.stock_level or ZERO) + quantity
        self.last_restocked = utcnow()
        return self.stock_level

    def remove_stock(self, amount: Decimal | int | str) -> Decimal:
        """
        Consume stock. Fails without touching the level when not enough is left.

        Returns:
            The new stock level.
        """
        quantity = require_places(require_positive(amount, "amount"), STOCK_PLACES, "amount")
        current = self.stock_level or ZERO
        if quantity > current:
            raise InvalidArgumentError(
                f"Insufficient stock for ingredient '{self.name}'",
                ingredient_id=self.id,
                requested=str(quantity),
                available=str(current),
            )
        self.stock_level = current - quantity
        return self.stock_level

    def needs_reordering(self) -> bool:
        return self.reorder_threshold is not None and (self.stock_level or ZERO) <= self.reorder_threshold

    def stock_value(self) -> Decimal:
        """Value of the stock on hand at the current unit cost."""
        if self.cost_per_unit is None:
            return round_money(ZERO)
        return round_money((self.stock_level or ZERO) * self.cost_per_unit)

    def __repr__(self) -> str:
        return f"<Ingredient(id={self.id}, name='{self.name}', stock={self.stock_level} {self.unit_of_measure})>"
