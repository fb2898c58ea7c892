"""
Security module: authenticated principal and role authorities.
"""

from cafe_shared.security.principal import UserPrincipal, authenticate, role_authorities

__all__ = [
    "UserPrincipal",
    "authenticate",
    "role_authorities",
]
