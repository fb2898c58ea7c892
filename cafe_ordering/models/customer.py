"""
Customer Models: Customer and LoyaltyProgram.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import Boolean, Date, DateTime, Enum as SQLEnum, ForeignKey, Integer, String, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from cafe_shared.config.constants import (
    MEMBER_NUMBER_FORMAT,
    POINTS_EXPIRY_WARNING_WINDOW,
    POINTS_VALIDITY,
    Limits,
    LoyaltyTier,
)
from cafe_shared.utils.exceptions import InvalidArgumentError
from cafe_shared.utils.money import require_positive_int

from .base import AuditMixin, Base, IdType, as_utc, utcnow

_PHONE_RE = re.compile(Limits.PHONE_PATTERN)


class LoyaltyProgram(AuditMixin, Base):
    """
    A customer's loyalty membership: points balance and tier.
    The tier is derived from the balance on every change and never set on its own.
    """

    __tablename__ = "loyalty_programs"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    customer_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    tier: Mapped[LoyaltyTier] = mapped_column(
        SQLEnum(LoyaltyTier, name="loyalty_tier"), default=LoyaltyTier.BRONZE, nullable=False
    )
    enrollment_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_points_earned_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    last_points_redeemed_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    points_expiration_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    member_number: Mapped[Optional[str]] = mapped_column(String(20), unique=True)
    eligible_for_special_offers: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        CheckConstraint("points >= 0", name="chk_loyalty_points_non_negative"),
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("points", 0)
        kwargs.setdefault("enrollment_date", utcnow())
        kwargs.setdefault("is_active", True)
        kwargs.setdefault("eligible_for_special_offers", True)
        if kwargs["points"] < 0:
            raise InvalidArgumentError("Points cannot be negative", field="points")
        kwargs["tier"] = LoyaltyTier.for_points(kwargs["points"])
        super().__init__(**kwargs)

    def add_points(self, points: int) -> int:
        """
        Credit points, extend their validity by a year and refresh the tier.

        Returns:
            The new balance.
        """
        require_positive_int(points, "points")
        now = utcnow()
        self.points = (self.points or 0) + points
        self.last_points_earned_date = now
        self.points_expiration_date = now + POINTS_VALIDITY
        self._update_tier()
        return self.points

    def redeem_points(self, points: int) -> int:
        """
        Spend points and refresh the tier.

        Returns:
            The remaining balance.
        """
        require_positive_int(points, "points")
        balance = self.points or 0
        if points > balance:
            raise InvalidArgumentError(
                "Cannot redeem more points than available",
                loyalty_program_id=self.id,
                requested=points,
                available=balance,
            )
        self.points = balance - points
        self.last_points_redeemed_date = utcnow()
        self._update_tier()
        return self.points

    def _update_tier(self) -> None:
        self.tier = LoyaltyTier.for_points(self.points or 0)

    def points_to_next_tier(self) -> int:
        """Points missing for the next tier; 0 at PLATINUM."""
        next_tier = self.tier.next_tier()
        if next_tier is None:
            return 0
        return max(0, next_tier.points_required - (self.points or 0))

    def is_points_expiring_soon(self) -> bool:
        """Expiration falls within the next 30 days (and has not passed)."""
        expiration = as_utc(self.points_expiration_date)
        if expiration is None:
            return False
        now = utcnow()
        return now < expiration < now + POINTS_EXPIRY_WARNING_WINDOW

    def generate_member_number(self) -> Optional[str]:
        """LP- followed by the customer id padded to 8 digits, once the id is known."""
        if self.customer_id is not None:
            self.member_number = MEMBER_NUMBER_FORMAT.format(self.customer_id)
        return self.member_number

    def __repr__(self) -> str:
        return f"<LoyaltyProgram(id={self.id}, customer_id={self.customer_id}, points={self.points}, tier={self.tier})>"


class Customer(AuditMixin, Base):
    """
    A café customer.

    Owns at most one loyalty program. Orders are not owned: they reference the
    customer and are listed through OrderRepository.find_by_customer.
    """

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(100), unique=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(20), unique=True)
    address: Mapped[Optional[str]] = mapped_column(String(200))
    city: Mapped[Optional[str]] = mapped_column(String(50))
    state: Mapped[Optional[str]] = mapped_column(String(50))
    postal_code: Mapped[Optional[str]] = mapped_column(String(10))
    country: Mapped[Optional[str]] = mapped_column(String(50))
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date)
    registration_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    dietary_preferences: Mapped[Optional[str]] = mapped_column(String(500))
    favorite_products: Mapped[Optional[str]] = mapped_column(String(500))
    marketing_consent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relationships
    loyalty_program: Mapped[Optional["LoyaltyProgram"]] = relationship(
        uselist=False, cascade="all, delete-orphan", lazy="selectin"
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("registration_date", utcnow())
        kwargs.setdefault("marketing_consent", False)
        kwargs.setdefault("is_active", True)
        super().__init__(**kwargs)

    @validates("email")
    def _normalize_email(self, key: str, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().lower()
        if "@" not in value:
            raise InvalidArgumentError("Invalid email address", field="email")
        return value

    @validates("phone_number")
    def _validate_phone(self, key: str, value: str | None) -> str | None:
        if value is not None and not _PHONE_RE.match(value):
            raise InvalidArgumentError(
                "Phone number must be between 10 and 15 digits", field="phone_number"
            )
        return value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def enroll_in_loyalty_program(self) -> LoyaltyProgram:
        """
        Enroll the customer unless already enrolled.

        Returns:
            The new or existing LoyaltyProgram.
        """
        if self.loyalty_program is None:
            program = LoyaltyProgram(customer_id=self.id, points=0)
            program.generate_member_number()
            self.loyalty_program = program
        return self.loyalty_program

    def is_birthday_today(self, today: date | None = None) -> bool:
        if self.date_of_birth is None:
            return False
        today = today or date.today()
        return (self.date_of_birth.month, self.date_of_birth.day) == (today.month, today.day)

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name='{self.full_name}')>"
