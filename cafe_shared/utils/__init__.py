"""
Utilities module: Exceptions, money rules.
"""

from cafe_shared.utils.exceptions import (
    NotFoundError,
    ForbiddenError,
    ValidationError,
    InvalidArgumentError,
    ConflictError,
)
from cafe_shared.utils.money import (
    round_money,
    to_decimal,
    require_positive,
    require_non_negative,
    validate_percentage,
)

__all__ = [
    # exceptions
    "NotFoundError",
    "ForbiddenError",
    "ValidationError",
    "InvalidArgumentError",
    "ConflictError",
    # money
    "round_money",
    "to_decimal",
    "require_positive",
    "require_non_negative",
    "validate_percentage",
]
