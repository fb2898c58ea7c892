"""
Customer Repository - Data access for customers and their loyalty programs.
"""

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, selectinload

from cafe_ordering.models import Customer, LoyaltyProgram
from .base import BaseRepository


class CustomerRepository(BaseRepository[Customer]):
    """
    Repository for Customer entities.

    Member numbers derive from the customer id, so a program enrolled before
    the customer was first flushed gets its number right after the insert.
    """

    @property
    def model(self) -> type[Customer]:
        return Customer

    def _base_query(self) -> Select:
        return (
            select(Customer)
            .options(selectinload(Customer.loyalty_program))
            .order_by(Customer.last_name, Customer.first_name, Customer.id)
        )

    def find_by_email(self, email: str) -> Customer | None:
        return self._db.scalar(self._base_query().where(Customer.email == email.strip().lower()))

    def find_by_phone(self, phone_number: str) -> Customer | None:
        return self._db.scalar(self._base_query().where(Customer.phone_number == phone_number))

    def find_by_member_number(self, member_number: str) -> Customer | None:
        query = (
            self._base_query()
            .join(LoyaltyProgram, LoyaltyProgram.customer_id == Customer.id)
            .where(LoyaltyProgram.member_number == member_number)
        )
        return self._db.scalar(query)

    def add(self, entity: Customer) -> Customer:
        super().add(entity)
        self.assign_member_number(entity)
        return entity

    def assign_member_number(self, customer: Customer) -> None:
        """Fill in a missing member number once the customer has an id."""
        program = customer.loyalty_program
        if program is None or program.member_number is not None:
            return
        if program.customer_id is None:
            program.customer_id = customer.id
        program.generate_member_number()
        self._flush()


def get_customer_repository(db: Session) -> CustomerRepository:
    """Factory function for CustomerRepository."""
    return CustomerRepository(db)
