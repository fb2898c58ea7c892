"""
Ingredient Repository - Data access for ingredients.
"""

from typing import Sequence

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from cafe_ordering.models import Ingredient
from .base import BaseRepository


class IngredientRepository(BaseRepository[Ingredient]):
    """Repository for Ingredient entities."""

    @property
    def model(self) -> type[Ingredient]:
        return Ingredient

    def _base_query(self) -> Select:
        return select(Ingredient).order_by(Ingredient.name)

    def find_by_name(self, name: str) -> Ingredient | None:
        return self._db.scalar(self._base_query().where(Ingredient.name == name))

    def find_allergens(self) -> Sequence[Ingredient]:
        query = self._base_query().where(Ingredient.is_allergen.is_(True))
        return self._db.execute(query).scalars().all()

    def find_needing_reorder(self, limit: int | None = None) -> Sequence[Ingredient]:
        """Ingredients at or below their reorder threshold, lowest stock first."""
        query = (
            select(Ingredient)
            .where(
                Ingredient.reorder_threshold.is_not(None),
                Ingredient.stock_level <= Ingredient.reorder_threshold,
            )
            .order_by(Ingredient.stock_level, Ingredient.name)
        )
        if limit is not None:
            query = query.limit(limit)
        return self._db.execute(query).scalars().all()


def get_ingredient_repository(db: Session) -> IngredientRepository:
    """Factory function for IngredientRepository."""
    return IngredientRepository(db)
