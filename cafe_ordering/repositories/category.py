"""
Category Repository - Data access for the category tree.
"""

from typing import Sequence

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, selectinload

from cafe_ordering.models import Category
from .base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """
    Repository for Category entities.

    Categories only know their children; find_children and find_roots walk the
    parent_id column instead of a parent reference.
    """

    @property
    def model(self) -> type[Category]:
        return Category

    def _base_query(self) -> Select:
        return (
            select(Category)
            .options(selectinload(Category.products))
            .order_by(Category.display_order, Category.name)
        )

    def find_by_name(self, name: str) -> Category | None:
        return self._db.scalar(self._base_query().where(Category.name == name))

    def find_roots(self) -> Sequence[Category]:
        query = self._base_query().where(Category.parent_id.is_(None))
        return self._db.execute(query).scalars().unique().all()

    def find_children(self, parent_id: int) -> Sequence[Category]:
        query = self._base_query().where(Category.parent_id == parent_id)
        return self._db.execute(query).scalars().unique().all()

    def find_parent(self, category: Category) -> Category | None:
        if category.parent_id is None:
            return None
        return self.find_by_id(category.parent_id)


def get_category_repository(db: Session) -> CategoryRepository:
    """Factory function for CategoryRepository."""
    return CategoryRepository(db)
