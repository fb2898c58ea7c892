"""
Tests for users, roles and the authenticated principal.
"""

import pytest

from cafe_shared.config.constants import RoleName
from cafe_shared.security import UserPrincipal, authenticate, role_authorities
from cafe_shared.utils.exceptions import ForbiddenError
from cafe_ordering.models import Role, User


def _user(**overrides):
    data = dict(
        username="barista",
        email="barista@cafe.test",
        password_hash="$2b$12$secret",
        first_name="Bea",
        last_name="Rista",
    )
    data.update(overrides)
    return User(**data)


class TestUserRoles:
    """Role membership."""

    def test_add_and_remove_roles(self):
        user = _user()
        staff = Role(name=RoleName.STAFF)

        user.add_role(staff)
        user.add_role(staff)
        assert user.has_role(RoleName.STAFF) is True
        assert user.has_role("ROLE_STAFF") is True
        assert len(user.roles) == 1

        assert user.remove_role(staff) is True
        assert user.remove_role(staff) is False
        assert user.has_role(RoleName.STAFF) is False

    def test_full_name(self):
        assert _user().full_name == "Bea Rista"
        assert _user(last_name=None).full_name == "Bea"

    def test_role_authorities(self):
        user = _user()
        user.add_role(Role(name=RoleName.ADMIN))
        user.add_role(Role(name=RoleName.STAFF))

        assert role_authorities(user) == frozenset({"ROLE_ADMIN", "ROLE_STAFF"})

    def test_no_roles_no_authorities(self):
        assert role_authorities(_user()) == frozenset()


class TestUserPrincipal:
    """Principal construction and serialization."""

    def test_from_user(self, seed_staff_user):
        principal = UserPrincipal.from_user(seed_staff_user)

        assert principal.id == seed_staff_user.id
        assert principal.username == "barista"
        assert principal.is_enabled is True
        assert principal.authorities == frozenset({"ROLE_STAFF", "ROLE_MANAGER"})
        assert principal.has_authority("ROLE_MANAGER") is True
        assert principal.has_authority("ROLE_ADMIN") is False

    def test_password_hash_never_serialized(self):
        principal = UserPrincipal.from_user(_user())

        assert principal.password_hash == "$2b$12$secret"
        assert "password_hash" not in principal.model_dump()
        assert "secret" not in principal.model_dump_json()
        assert "secret" not in repr(principal)


class TestAuthenticate:
    """Login checks."""

    def test_active_user(self):
        principal = authenticate(_user(is_active=True))
        assert principal.username == "barista"

    def test_inactive_user_rejected(self):
        with pytest.raises(ForbiddenError) as exc_info:
            authenticate(_user(is_active=False))
        assert exc_info.value.status_code == 403
