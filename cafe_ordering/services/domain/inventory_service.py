"""
Inventory Domain Service.

Stock movements for ingredients and products, and the low-stock report.
"""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from cafe_shared.config.logging import inventory_logger
from cafe_shared.config.settings import settings
from cafe_shared.infrastructure.db import safe_commit
from cafe_shared.utils.exceptions import NotFoundError
from cafe_shared.utils.money import Number
from cafe_ordering.models import Ingredient, Product
from cafe_ordering.repositories import get_ingredient_repository, get_product_repository


class LowStockEntry(BaseModel):
    """One line of the low-stock report."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ingredient", "product"]
    id: int
    name: str
    stock_level: Decimal
    reorder_threshold: Decimal
    unit: str | None = None


class InventoryService:
    """Domain service for stock operations."""

    def __init__(self, db: Session):
        self._db = db
        self._ingredients = get_ingredient_repository(db)
        self._products = get_product_repository(db)

    def _get_ingredient(self, ingredient_id: int) -> Ingredient:
        ingredient = self._ingredients.find_by_id(ingredient_id)
        if ingredient is None:
            raise NotFoundError("Ingredient", ingredient_id)
        return ingredient

    def _get_product(self, product_id: int) -> Product:
        product = self._products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    # =========================================================================
    # Ingredients
    # =========================================================================

    def restock_ingredient(self, ingredient_id: int, amount: Number, actor: str | None = None) -> Decimal:
        ingredient = self._get_ingredient(ingredient_id)
        level = ingredient.add_stock(amount)
        ingredient.set_updated_by(actor)
        self._ingredients.save(ingredient)
        safe_commit(self._db)

        inventory_logger.info(
            "Ingredient restocked",
            ingredient_id=ingredient_id,
            amount=str(amount),
            stock_level=str(level),
        )
        return level

    def consume_ingredient(self, ingredient_id: int, amount: Number, actor: str | None = None) -> Decimal:
        ingredient = self._get_ingredient(ingredient_id)
        level = ingredient.remove_stock(amount)
        ingredient.set_updated_by(actor)
        self._ingredients.save(ingredient)
        safe_commit(self._db)

        if ingredient.needs_reordering():
            inventory_logger.warning(
                "Ingredient below reorder threshold",
                ingredient_id=ingredient_id,
                stock_level=str(level),
                reorder_threshold=str(ingredient.reorder_threshold),
            )
        return level

    # =========================================================================
    # Products
    # =========================================================================

    def restock_product(self, product_id: int, quantity: int, actor: str | None = None) -> int:
        product = self._get_product(product_id)
        level = product.restock_product(quantity)
        product.set_updated_by(actor)
        self._products.save(product)
        safe_commit(self._db)

        inventory_logger.info("Product restocked", product_id=product_id, quantity=quantity, stock_level=level)
        return level

    def reduce_product_stock(self, product_id: int, quantity: int, actor: str | None = None) -> int:
        product = self._get_product(product_id)
        level = product.reduce_stock(quantity)
        product.set_updated_by(actor)
        self._products.save(product)
        safe_commit(self._db)

        if product.needs_reordering():
            inventory_logger.warning(
                "Product below reorder threshold",
                product_id=product_id,
                stock_level=level,
                reorder_threshold=product.reorder_threshold,
            )
        return level

    # =========================================================================
    # Reporting
    # =========================================================================

    def low_stock_report(self, limit: int | None = None) -> list[LowStockEntry]:
        """
        Ingredients and products at or below their reorder threshold.

        Ingredients come first, each group ordered by the repositories.
        """
        limit = limit or settings.low_stock_report_limit
        entries = [
            LowStockEntry(
                kind="ingredient",
                id=ingredient.id,
                name=ingredient.name,
                stock_level=ingredient.stock_level,
                reorder_threshold=ingredient.reorder_threshold,
                unit=ingredient.unit_of_measure.value,
            )
            for ingredient in self._ingredients.find_needing_reorder(limit)
        ]
        entries.extend(
            LowStockEntry(
                kind="product",
                id=product.id,
                name=product.name,
                stock_level=Decimal(product.stock_level),
                reorder_threshold=Decimal(product.reorder_threshold),
            )
            for product in self._products.find_needing_reorder()
        )
        return entries[:limit]
