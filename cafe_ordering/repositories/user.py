"""
User Repository - Data access for staff users and roles.
"""

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, selectinload

from cafe_shared.config.constants import RoleName
from cafe_ordering.models import Role, User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entities (roles eager loaded)."""

    @property
    def model(self) -> type[User]:
        return User

    def _base_query(self) -> Select:
        return select(User).options(selectinload(User.roles)).order_by(User.username)

    def find_by_username(self, username: str) -> User | None:
        return self._db.scalar(self._base_query().where(User.username == username))

    def find_by_email(self, email: str) -> User | None:
        return self._db.scalar(self._base_query().where(User.email == email))


class RoleRepository(BaseRepository[Role]):
    """Repository for Role entities."""

    @property
    def model(self) -> type[Role]:
        return Role

    def _base_query(self) -> Select:
        return select(Role).order_by(Role.name)

    def find_by_name(self, name: RoleName) -> Role | None:
        return self._db.scalar(self._base_query().where(Role.name == name))


def get_user_repository(db: Session) -> UserRepository:
    """Factory function for UserRepository."""
    return UserRepository(db)


def get_role_repository(db: Session) -> RoleRepository:
    """Factory function for RoleRepository."""
    return RoleRepository(db)
