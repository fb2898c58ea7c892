"""
Centralized constants for the ordering core.
Avoid magic strings and repeated constants.

Usage:
    from cafe_shared.config.constants import OrderStatus, PaymentMethod, TAX_RATE

    if order.status == OrderStatus.CREATED:
        ...
"""

from datetime import timedelta
from decimal import Decimal
from enum import Enum
from typing import Final


# =============================================================================
# Money
# =============================================================================

# Flat sales tax applied to every order subtotal
TAX_RATE: Final[Decimal] = Decimal("0.10")


# =============================================================================
# Order Status
# =============================================================================


class OrderStatus(str, Enum):
    """
    Order lifecycle.

    CREATED → PAID → IN_PREPARATION → READY → COMPLETED
    CANCELLED and REFUNDED are side exits.
    """

    CREATED = "CREATED"
    PAID = "PAID"
    IN_PREPARATION = "IN_PREPARATION"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"

    @property
    def description(self) -> str:
        return ORDER_STATUS_DESCRIPTIONS[self]

    def can_cancel(self) -> bool:
        """Orders can be cancelled unless already completed, cancelled or refunded."""
        return self not in (OrderStatus.CANCELLED, OrderStatus.COMPLETED, OrderStatus.REFUNDED)

    def can_refund(self) -> bool:
        """Only orders that went past CREATED and were not refunded yet."""
        return self not in (OrderStatus.CREATED, OrderStatus.REFUNDED)

    def is_active(self) -> bool:
        return self not in TERMINAL_ORDER_STATUSES

    def can_progress(self) -> bool:
        return self not in TERMINAL_ORDER_STATUSES

    def next_status(self) -> "OrderStatus | None":
        """Next status in the normal flow, None at the end of the chain."""
        return ORDER_STATUS_FLOW.get(self)


ORDER_STATUS_DESCRIPTIONS: Final[dict[OrderStatus, str]] = {
    OrderStatus.CREATED: "Order has been created but not yet paid for",
    OrderStatus.PAID: "Payment has been received but preparation has not started",
    OrderStatus.IN_PREPARATION: "Order is being prepared by the kitchen staff",
    OrderStatus.READY: "Order is ready for pickup or delivery",
    OrderStatus.COMPLETED: "Order has been delivered to the customer",
    OrderStatus.CANCELLED: "Order has been cancelled",
    OrderStatus.REFUNDED: "Order has been refunded",
}

TERMINAL_ORDER_STATUSES: Final[frozenset[OrderStatus]] = frozenset({
    OrderStatus.COMPLETED,
    OrderStatus.CANCELLED,
    OrderStatus.REFUNDED,
})

# Normal flow (from -> next)
ORDER_STATUS_FLOW: Final[dict[OrderStatus, OrderStatus]] = {
    OrderStatus.CREATED: OrderStatus.PAID,
    OrderStatus.PAID: OrderStatus.IN_PREPARATION,
    OrderStatus.IN_PREPARATION: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.COMPLETED,
}


# =============================================================================
# Payment Methods
# =============================================================================


class PaymentMethod(str, Enum):
    """Payment methods accepted at the café."""

    CASH = "CASH"
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    MOBILE_PAYMENT = "MOBILE_PAYMENT"
    LOYALTY_POINTS = "LOYALTY_POINTS"
    GIFT_CARD = "GIFT_CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    INVOICE = "INVOICE"

    @property
    def description(self) -> str:
        return PAYMENT_METHOD_INFO[self][0]

    @property
    def requires_validation(self) -> bool:
        """Needs electronic authorization (e.g. card networks)."""
        return PAYMENT_METHOD_INFO[self][1]

    @property
    def can_process_offline(self) -> bool:
        return PAYMENT_METHOD_INFO[self][2]

    def is_electronic(self) -> bool:
        return self is not PaymentMethod.CASH

    def is_eligible_for_loyalty_points(self) -> bool:
        """Paying with loyalty points does not earn more points."""
        return self is not PaymentMethod.LOYALTY_POINTS


# method -> (description, requires_validation, can_process_offline)
PAYMENT_METHOD_INFO: Final[dict[PaymentMethod, tuple[str, bool, bool]]] = {
    PaymentMethod.CASH: ("Cash payment", False, True),
    PaymentMethod.CREDIT_CARD: ("Credit card payment", True, False),
    PaymentMethod.DEBIT_CARD: ("Debit card payment", True, False),
    PaymentMethod.MOBILE_PAYMENT: ("Mobile payment (Apple Pay, Google Pay, etc.)", True, False),
    PaymentMethod.LOYALTY_POINTS: ("Payment using loyalty program points", True, False),
    PaymentMethod.GIFT_CARD: ("Gift card payment", True, False),
    PaymentMethod.BANK_TRANSFER: ("Direct bank transfer", True, False),
    PaymentMethod.INVOICE: ("Payment via invoice (for business accounts)", False, False),
}


# =============================================================================
# Loyalty Program
# =============================================================================


class LoyaltyTier(str, Enum):
    """Loyalty tiers, declared in ascending threshold order."""

    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"

    @property
    def points_required(self) -> int:
        return LOYALTY_TIER_THRESHOLDS[self]

    def next_tier(self) -> "LoyaltyTier | None":
        tiers = list(LoyaltyTier)
        index = tiers.index(self)
        return tiers[index + 1] if index + 1 < len(tiers) else None

    @classmethod
    def for_points(cls, points: int) -> "LoyaltyTier":
        """Highest tier whose threshold does not exceed the balance."""
        tier = cls.BRONZE
        for candidate in cls:
            if points >= candidate.points_required:
                tier = candidate
            else:
                break
        return tier


LOYALTY_TIER_THRESHOLDS: Final[dict[LoyaltyTier, int]] = {
    LoyaltyTier.BRONZE: 0,
    LoyaltyTier.SILVER: 100,
    LoyaltyTier.GOLD: 300,
    LoyaltyTier.PLATINUM: 500,
}

POINTS_VALIDITY: Final[timedelta] = timedelta(days=365)
POINTS_EXPIRY_WARNING_WINDOW: Final[timedelta] = timedelta(days=30)
MEMBER_NUMBER_FORMAT: Final[str] = "LP-{:08d}"


# =============================================================================
# Inventory
# =============================================================================


class UnitOfMeasure(str, Enum):
    """Units used for ingredient stock."""

    GRAM = "GRAM"
    KILOGRAM = "KILOGRAM"
    MILLILITER = "MILLILITER"
    LITER = "LITER"
    TEASPOON = "TEASPOON"
    TABLESPOON = "TABLESPOON"
    OUNCE = "OUNCE"
    POUND = "POUND"
    PIECE = "PIECE"
    CUP = "CUP"
    PINCH = "PINCH"
    EACH = "EACH"


# =============================================================================
# User Roles
# =============================================================================


class RoleName(str, Enum):
    """Role names, used verbatim as authority strings."""

    ADMIN = "ROLE_ADMIN"
    MANAGER = "ROLE_MANAGER"
    STAFF = "ROLE_STAFF"


# Role groups for common access patterns
MANAGEMENT_ROLES: Final[frozenset[RoleName]] = frozenset({RoleName.ADMIN, RoleName.MANAGER})
ALL_STAFF_ROLES: Final[frozenset[RoleName]] = frozenset(RoleName)


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # Order number: YYYYMMDD-XXXX
    ORDER_NUMBER_SUFFIX_LENGTH: Final[int] = 4

    # Pagination defaults
    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 200

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 100
    MAX_DISCOUNT_REASON_LENGTH: Final[int] = 100
    MAX_INSTRUCTIONS_LENGTH: Final[int] = 255
    MAX_NOTES_LENGTH: Final[int] = 500

    # Customer phone numbers: optional +, 10 to 15 digits
    PHONE_PATTERN: Final[str] = r"^\+?[0-9]{10,15}$"
