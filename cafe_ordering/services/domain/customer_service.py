"""
Customer Domain Service.

Registration, loyalty enrollment and redemption, order history lookups.
"""

from typing import Sequence

from sqlalchemy.orm import Session

from cafe_shared.config.logging import loyalty_logger, mask_email
from cafe_shared.infrastructure.db import safe_commit
from cafe_shared.utils.exceptions import InvalidArgumentError, NotFoundError
from cafe_ordering.models import Customer, LoyaltyProgram, Order
from cafe_ordering.repositories import get_customer_repository, get_order_repository


class CustomerService:
    """Domain service for Customer and LoyaltyProgram operations."""

    def __init__(self, db: Session):
        self._db = db
        self._customers = get_customer_repository(db)
        self._orders = get_order_repository(db)

    def get_customer(self, customer_id: int) -> Customer:
        customer = self._customers.find_by_id(customer_id)
        if customer is None:
            raise NotFoundError("Customer", customer_id)
        return customer

    def register_customer(
        self,
        first_name: str,
        last_name: str,
        *,
        email: str | None = None,
        phone_number: str | None = None,
        enroll: bool = False,
        actor: str | None = None,
        **details,
    ) -> Customer:
        """
        Create a customer, optionally enrolled in the loyalty program.

        Raises:
            DuplicateEntityError: Email or phone number already registered.
        """
        customer = Customer(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone_number=phone_number,
            **details,
        )
        customer.set_created_by(actor)
        if enroll:
            customer.enroll_in_loyalty_program()
        self._customers.add(customer)
        safe_commit(self._db)

        loyalty_logger.info(
            "Customer registered",
            customer_id=customer.id,
            email=mask_email(email),
            member_number=customer.loyalty_program.member_number if customer.loyalty_program else None,
        )
        return customer

    def enroll_in_loyalty(self, customer_id: int, actor: str | None = None) -> LoyaltyProgram:
        """Enroll the customer (no-op if already enrolled) and return the program."""
        customer = self.get_customer(customer_id)
        already_enrolled = customer.loyalty_program is not None
        program = customer.enroll_in_loyalty_program()
        if already_enrolled:
            return program

        customer.set_updated_by(actor)
        self._customers.save(customer)
        self._customers.assign_member_number(customer)
        safe_commit(self._db)

        loyalty_logger.info(
            "Customer enrolled in loyalty program",
            customer_id=customer.id,
            member_number=program.member_number,
        )
        return program

    def redeem_points(self, customer_id: int, points: int, actor: str | None = None) -> int:
        """
        Spend loyalty points.

        Returns:
            The remaining balance.
        """
        customer = self.get_customer(customer_id)
        program = customer.loyalty_program
        if program is None:
            raise InvalidArgumentError(
                "Customer is not enrolled in the loyalty program",
                customer_id=customer_id,
            )

        remaining = program.redeem_points(points)
        customer.set_updated_by(actor)
        self._customers.save(customer)
        safe_commit(self._db)

        loyalty_logger.info(
            "Loyalty points redeemed",
            customer_id=customer_id,
            points=points,
            remaining=remaining,
            tier=program.tier.value,
        )
        return remaining

    def order_count(self, customer_id: int) -> int:
        self.get_customer(customer_id)
        return self._orders.count_by_customer(customer_id)

    def order_history(self, customer_id: int, limit: int | None = None) -> Sequence[Order]:
        self.get_customer(customer_id)
        return self._orders.find_by_customer(customer_id, limit=limit)
