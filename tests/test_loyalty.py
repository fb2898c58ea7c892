"""
Tests for the loyalty ledger and tiers.
"""

from datetime import timedelta

import pytest

from cafe_shared.config.constants import LoyaltyTier
from cafe_shared.utils.exceptions import InvalidArgumentError
from cafe_ordering.models import LoyaltyProgram
from cafe_ordering.models.base import utcnow


class TestTierBoundaries:
    """Tier is the highest threshold not above the balance."""

    @pytest.mark.parametrize(
        "points,tier",
        [
            (0, LoyaltyTier.BRONZE),
            (99, LoyaltyTier.BRONZE),
            (100, LoyaltyTier.SILVER),
            (299, LoyaltyTier.SILVER),
            (300, LoyaltyTier.GOLD),
            (499, LoyaltyTier.GOLD),
            (500, LoyaltyTier.PLATINUM),
            (10_000, LoyaltyTier.PLATINUM),
        ],
    )
    def test_for_points(self, points, tier):
        assert LoyaltyTier.for_points(points) == tier

    def test_add_points_promotes(self):
        program = LoyaltyProgram(customer_id=1)
        assert program.tier == LoyaltyTier.BRONZE

        program.add_points(99)
        assert program.tier == LoyaltyTier.BRONZE
        program.add_points(1)
        assert program.tier == LoyaltyTier.SILVER

    def test_redeem_demotes(self):
        program = LoyaltyProgram(customer_id=1)
        program.add_points(300)
        assert program.tier == LoyaltyTier.GOLD

        remaining = program.redeem_points(201)

        assert remaining == 99
        assert program.tier == LoyaltyTier.BRONZE
        assert program.last_points_redeemed_date is not None


class TestPointsLedger:
    """add_points / redeem_points preconditions."""

    def test_add_points_sets_dates(self):
        program = LoyaltyProgram(customer_id=1)
        before = utcnow()

        assert program.add_points(10) == 10

        assert program.last_points_earned_date >= before
        expected = program.last_points_earned_date + timedelta(days=365)
        assert program.points_expiration_date == expected

    @pytest.mark.parametrize("points", [0, -5])
    def test_non_positive_points_rejected(self, points):
        program = LoyaltyProgram(customer_id=1, points=50)
        with pytest.raises(InvalidArgumentError):
            program.add_points(points)
        with pytest.raises(InvalidArgumentError):
            program.redeem_points(points)
        assert program.points == 50

    def test_over_redeem_rejected(self):
        program = LoyaltyProgram(customer_id=1, points=50)
        with pytest.raises(InvalidArgumentError):
            program.redeem_points(51)
        assert program.points == 50
        assert program.last_points_redeemed_date is None

    def test_initial_points_set_tier(self):
        assert LoyaltyProgram(customer_id=1, points=320).tier == LoyaltyTier.GOLD


class TestLoyaltyQueries:
    """Next tier, expiry warning, member number."""

    @pytest.mark.parametrize(
        "points,missing",
        [(0, 100), (99, 1), (100, 200), (450, 50), (500, 0), (900, 0)],
    )
    def test_points_to_next_tier(self, points, missing):
        assert LoyaltyProgram(customer_id=1, points=points).points_to_next_tier() == missing

    def test_expiring_soon_window(self):
        program = LoyaltyProgram(customer_id=1)
        assert program.is_points_expiring_soon() is False

        program.points_expiration_date = utcnow() + timedelta(days=10)
        assert program.is_points_expiring_soon() is True

        program.points_expiration_date = utcnow() + timedelta(days=45)
        assert program.is_points_expiring_soon() is False

        program.points_expiration_date = utcnow() - timedelta(days=1)
        assert program.is_points_expiring_soon() is False

    def test_fresh_points_are_not_expiring(self):
        program = LoyaltyProgram(customer_id=1)
        program.add_points(5)
        assert program.is_points_expiring_soon() is False

    def test_member_number(self):
        assert LoyaltyProgram(customer_id=42).generate_member_number() == "LP-00000042"

    def test_member_number_waits_for_customer_id(self):
        program = LoyaltyProgram()
        assert program.generate_member_number() is None
