"""
Base Repository implementation.
Provides common data access patterns with version checks on save.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TypeVar, Generic, Sequence

from sqlalchemy import Select, select, func, update, inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from cafe_shared.config.constants import Limits
from cafe_shared.utils.exceptions import DatabaseError, DuplicateEntityError, StaleEntityError

ModelT = TypeVar("ModelT")


@dataclass
class RepositoryFilters:
    """Base filters for repository queries."""

    # Pagination
    limit: int = Limits.DEFAULT_PAGE_SIZE
    offset: int = 0

    # Soft filter on is_active where the model has one
    active_only: bool = False

    def __post_init__(self):
        """Validate and normalize filters."""
        self.limit = min(max(1, self.limit), Limits.MAX_PAGE_SIZE)
        self.offset = max(0, self.offset)


class BaseRepository(ABC, Generic[ModelT]):
    """
    Abstract base repository with common operations.

    Subclasses must implement:
    - model: Return the SQLAlchemy model class
    - _base_query(): Return base query with ordering and eager loading

    Saving a persistent entity bumps its version column with
    UPDATE ... WHERE id = :id AND version = :loaded; if no row matches, some
    other writer got there first and StaleEntityError is raised.
    """

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        """Return the SQLAlchemy model class."""
        ...

    @abstractmethod
    def _base_query(self) -> Select:
        """Return base query with proper eager loading and ordering."""
        ...

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply entity-specific filters to query."""
        return query

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    # =========================================================================
    # Reads
    # =========================================================================

    def find_all(self, filters: RepositoryFilters | None = None) -> Sequence[ModelT]:
        """
        Find all entities matching filters.

        Args:
            filters: Optional filters

        Returns:
            List of entities
        """
        filters = filters or RepositoryFilters()
        query = self._base_query()

        if filters.active_only and hasattr(self.model, "is_active"):
            query = query.where(self.model.is_active.is_(True))

        query = self._apply_filters(query, filters)
        query = query.offset(filters.offset).limit(filters.limit)

        return self._db.execute(query).scalars().unique().all()

    def find_by_id(self, entity_id: int) -> ModelT | None:
        query = self._base_query().where(self.model.id == entity_id)
        return self._db.scalar(query)

    def count(self, filters: RepositoryFilters | None = None) -> int:
        filters = filters or RepositoryFilters()
        query = select(func.count()).select_from(self.model)

        if filters.active_only and hasattr(self.model, "is_active"):
            query = query.where(self.model.is_active.is_(True))

        return self._db.scalar(query) or 0

    def exists(self, entity_id: int) -> bool:
        query = select(func.count()).select_from(self.model).where(self.model.id == entity_id)
        return (self._db.scalar(query) or 0) > 0

    # =========================================================================
    # Writes
    # =========================================================================

    def add(self, entity: ModelT) -> ModelT:
        """
        Insert a new entity.

        Raises:
            DuplicateEntityError: A unique constraint rejected the row.
        """
        self._db.add(entity)
        self._flush()
        return entity

    def save(self, entity: ModelT) -> ModelT:
        """
        Save entity (insert or versioned update).

        Args:
            entity: Entity to save

        Returns:
            Saved entity

        Raises:
            StaleEntityError: Stored version advanced since the entity was loaded.
            DuplicateEntityError: A unique constraint rejected the change.
        """
        if not inspect(entity).has_identity:
            return self.add(entity)

        loaded_version = entity.version
        result = self._db.execute(
            update(self.model)
            .where(self.model.id == entity.id, self.model.version == loaded_version)
            .values(version=loaded_version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self._db.rollback()
            raise StaleEntityError(self.entity_name, entity.id, loaded_version)

        set_committed_value(entity, "version", loaded_version + 1)
        self._flush()
        return entity

    def delete(self, entity: ModelT) -> None:
        """Hard delete entity."""
        self._db.delete(entity)
        self._flush()

    def _flush(self) -> None:
        try:
            self._db.flush()
        except IntegrityError as exc:
            self._db.rollback()
            message = str(exc.orig)
            if "unique" in message.lower() or "duplicate" in message.lower():
                raise DuplicateEntityError(self.entity_name, error=message) from exc
            raise DatabaseError(f"{self.entity_name} save", error=message) from exc
