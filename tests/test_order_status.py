"""
Tests for the order status state machine.
"""

import pytest

from cafe_shared.config.constants import OrderStatus, PaymentMethod
from cafe_shared.utils.exceptions import InvalidArgumentError
from cafe_ordering.models import Order


def _order_in(status: OrderStatus) -> Order:
    return Order(status=status)


class TestOrderStatusEnum:
    """Status helpers."""

    def test_flow(self):
        assert OrderStatus.CREATED.next_status() == OrderStatus.PAID
        assert OrderStatus.PAID.next_status() == OrderStatus.IN_PREPARATION
        assert OrderStatus.IN_PREPARATION.next_status() == OrderStatus.READY
        assert OrderStatus.READY.next_status() == OrderStatus.COMPLETED
        assert OrderStatus.COMPLETED.next_status() is None
        assert OrderStatus.CANCELLED.next_status() is None

    @pytest.mark.parametrize("status", [OrderStatus.COMPLETED, OrderStatus.CANCELLED, OrderStatus.REFUNDED])
    def test_terminal_statuses(self, status):
        assert status.can_progress() is False
        assert status.is_active() is False
        assert status.can_cancel() is False

    def test_refund_rules(self):
        assert OrderStatus.CREATED.can_refund() is False
        assert OrderStatus.REFUNDED.can_refund() is False
        assert OrderStatus.COMPLETED.can_refund() is True
        assert OrderStatus.CANCELLED.can_refund() is True

    def test_descriptions(self):
        assert OrderStatus.READY.description == "Order is ready for pickup or delivery"


class TestUpdateStatus:
    """update_status precedence rules."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PAID, OrderStatus.IN_PREPARATION),
            (OrderStatus.IN_PREPARATION, OrderStatus.READY),
            (OrderStatus.READY, OrderStatus.COMPLETED),
        ],
    )
    def test_forward_steps(self, current, target):
        order = _order_in(current)
        assert order.update_status(target) is True
        assert order.status == target

    def test_created_to_paid_is_the_normal_next_step(self):
        order = _order_in(OrderStatus.CREATED)
        assert order.update_status(OrderStatus.PAID) is True

    def test_skipping_steps_refused(self):
        order = _order_in(OrderStatus.PAID)
        assert order.update_status(OrderStatus.READY) is False
        assert order.status == OrderStatus.PAID

    def test_going_back_refused(self):
        order = _order_in(OrderStatus.READY)
        assert order.update_status(OrderStatus.PAID) is False

    @pytest.mark.parametrize(
        "current",
        [OrderStatus.CREATED, OrderStatus.PAID, OrderStatus.IN_PREPARATION, OrderStatus.READY],
    )
    def test_cancel_from_active_statuses(self, current):
        order = _order_in(current)
        assert order.update_status(OrderStatus.CANCELLED) is True
        assert order.status == OrderStatus.CANCELLED

    def test_refund_from_completed(self):
        order = _order_in(OrderStatus.COMPLETED)
        assert order.update_status(OrderStatus.REFUNDED) is True
        assert order.status == OrderStatus.REFUNDED

    def test_refund_from_cancelled(self):
        order = _order_in(OrderStatus.CANCELLED)
        assert order.update_status(OrderStatus.REFUNDED) is True

    def test_refund_of_unpaid_order_refused(self):
        order = _order_in(OrderStatus.CREATED)
        assert order.update_status(OrderStatus.REFUNDED) is False
        assert order.status == OrderStatus.CREATED

    def test_refunded_is_final(self):
        order = _order_in(OrderStatus.REFUNDED)
        for target in OrderStatus:
            assert order.update_status(target) is False
        assert order.status == OrderStatus.REFUNDED

    def test_completed_cannot_be_cancelled(self):
        order = _order_in(OrderStatus.COMPLETED)
        assert order.update_status(OrderStatus.CANCELLED) is False

    def test_string_status_is_accepted(self):
        order = _order_in(OrderStatus.PAID)
        assert order.update_status("IN_PREPARATION") is True

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidArgumentError):
            _order_in(OrderStatus.PAID).update_status("SHIPPED")


class TestPaymentMethod:
    """Payment method capabilities."""

    def test_loyalty_eligibility(self):
        eligible = {m for m in PaymentMethod if m.is_eligible_for_loyalty_points()}
        assert PaymentMethod.LOYALTY_POINTS not in eligible
        assert PaymentMethod.CASH in eligible

    def test_cash_is_the_only_non_electronic_method(self):
        assert [m for m in PaymentMethod if not m.is_electronic()] == [PaymentMethod.CASH]

    def test_cash_processes_offline(self):
        assert PaymentMethod.CASH.can_process_offline is True
        assert PaymentMethod.CREDIT_CARD.requires_validation is True
