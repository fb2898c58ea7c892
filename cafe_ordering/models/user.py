"""
User and Role Models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, Column, DateTime, Enum as SQLEnum, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cafe_shared.config.constants import RoleName
from cafe_shared.utils.exceptions import InvalidArgumentError

from .base import AuditMixin, Base, IdType


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(AuditMixin, Base):
    """A named role. The name doubles as the authority string."""

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[RoleName] = mapped_column(SQLEnum(RoleName, name="role_name"), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name='{self.name.value if self.name else None}')>"


class User(AuditMixin, Base):
    """
    Staff member account.
    Inherits: created_at, updated_at, created_by, updated_by, version from AuditMixin.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(50))
    last_name: Mapped[Optional[str]] = mapped_column(String(50))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # Relationships
    roles: Mapped[set["Role"]] = relationship(secondary=user_roles, collection_class=set, lazy="selectin")

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("is_active", True)
        super().__init__(**kwargs)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def has_role(self, name: RoleName | str) -> bool:
        return any(role.name == name for role in self.roles)

    def add_role(self, role: Role) -> None:
        if role is None:
            raise InvalidArgumentError("Role cannot be None")
        self.roles.add(role)

    def remove_role(self, role: Role) -> bool:
        if role not in self.roles:
            return False
        self.roles.discard(role)
        return True

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', email='{self.email}')>"
