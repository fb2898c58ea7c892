"""
Configuration module: Settings, logging, constants.
"""

from cafe_shared.config.settings import settings, get_settings
from cafe_shared.config.logging import get_logger, setup_logging
from cafe_shared.config.constants import (
    TAX_RATE,
    OrderStatus,
    PaymentMethod,
    LoyaltyTier,
    UnitOfMeasure,
    RoleName,
    Limits,
    MANAGEMENT_ROLES,
)

__all__ = [
    # settings
    "settings",
    "get_settings",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "TAX_RATE",
    "OrderStatus",
    "PaymentMethod",
    "LoyaltyTier",
    "UnitOfMeasure",
    "RoleName",
    "Limits",
    "MANAGEMENT_ROLES",
]
