"""
Product Repository - Data access for products.
Ingredients are eager loaded; they hold no link back to products, so
find_by_ingredient is the reverse lookup.
"""

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import Select, select, or_
from sqlalchemy.orm import Session, selectinload

from cafe_ordering.models import Product, product_ingredients
from .base import BaseRepository, RepositoryFilters


@dataclass
class ProductFilters(RepositoryFilters):
    """Filters specific to products."""

    category_id: int | None = None
    search: str | None = None

    def __post_init__(self):
        super().__post_init__()
        if self.search:
            self.search = self.search.strip()


class ProductRepository(BaseRepository[Product]):
    """Repository for Product entities."""

    @property
    def model(self) -> type[Product]:
        return Product

    def _base_query(self) -> Select:
        return (
            select(Product)
            .options(selectinload(Product.ingredients))
            # Order by name for consistent results
            .order_by(Product.name)
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply product-specific filters."""
        if not isinstance(filters, ProductFilters):
            return query

        if filters.category_id is not None:
            query = query.where(Product.category_id == filters.category_id)

        if filters.search:
            search_term = f"%{filters.search}%"
            query = query.where(
                or_(
                    Product.name.ilike(search_term),
                    Product.description.ilike(search_term),
                )
            )

        return query

    def find_by_barcode(self, barcode: str) -> Product | None:
        return self._db.scalar(self._base_query().where(Product.barcode == barcode))

    def find_by_category(self, category_id: int, active_only: bool = False) -> Sequence[Product]:
        """Products directly linked to a category (subcategories not included)."""
        query = self._base_query().where(Product.category_id == category_id)

        if active_only:
            query = query.where(Product.is_active.is_(True))

        return self._db.execute(query).scalars().unique().all()

    def find_by_ingredient(self, ingredient_id: int) -> Sequence[Product]:
        """Products whose recipe uses the ingredient."""
        query = (
            self._base_query()
            .join(product_ingredients, product_ingredients.c.product_id == Product.id)
            .where(product_ingredients.c.ingredient_id == ingredient_id)
        )
        return self._db.execute(query).scalars().unique().all()

    def find_needing_reorder(self) -> Sequence[Product]:
        """Products at or below their reorder threshold."""
        query = self._base_query().where(
            Product.reorder_threshold.is_not(None),
            Product.stock_level <= Product.reorder_threshold,
        )
        return self._db.execute(query).scalars().unique().all()


def get_product_repository(db: Session) -> ProductRepository:
    """Factory function for ProductRepository."""
    return ProductRepository(db)
