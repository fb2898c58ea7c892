"""
Authentication collaborator: the authenticated view of a User.

Credential checking (password hashing, tokens, sessions) happens elsewhere;
this module maps a loaded User to its authorities and refuses inactive
accounts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from cafe_shared.config.logging import mask_email, security_audit_logger
from cafe_shared.utils.exceptions import ForbiddenError

if TYPE_CHECKING:
    from cafe_ordering.models import User


def role_authorities(user: "User") -> frozenset[str]:
    """Authority strings for a user: one per role, the role name verbatim."""
    return frozenset(role.name.value for role in user.roles)


class UserPrincipal(BaseModel):
    """Authenticated user as seen by the security layer."""

    model_config = ConfigDict(frozen=True)

    id: int | None
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    # Never serialized
    password_hash: str = Field(exclude=True, repr=False)
    is_active: bool = True
    authorities: frozenset[str] = frozenset()

    @classmethod
    def from_user(cls, user: "User") -> "UserPrincipal":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            password_hash=user.password_hash,
            is_active=bool(user.is_active),
            authorities=role_authorities(user),
        )

    @property
    def is_enabled(self) -> bool:
        return self.is_active

    def has_authority(self, authority: str) -> bool:
        return authority in self.authorities


def authenticate(user: "User") -> UserPrincipal:
    """
    Build the principal for a user whose credentials were already verified.

    Raises:
        ForbiddenError: The account is deactivated.
    """
    if not user.is_active:
        security_audit_logger.warning(
            "Login rejected for inactive user",
            user_id=user.id,
            email=mask_email(user.email),
        )
        raise ForbiddenError("log in with an inactive account", user_id=user.id)

    security_audit_logger.info(
        "User authenticated",
        user_id=user.id,
        email=mask_email(user.email),
        authorities=sorted(role_authorities(user)),
    )
    return UserPrincipal.from_user(user)
