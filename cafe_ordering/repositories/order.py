"""
Order Repository - Data access for orders.
Items are eager loaded with their products to avoid N+1 on totals.
"""

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import Select, select, func
from sqlalchemy.orm import Session, selectinload

from cafe_shared.config.constants import Limits, OrderStatus
from cafe_ordering.models import Order, OrderItem
from cafe_ordering.services.order_numbers import OrderNumberGenerator
from .base import BaseRepository, RepositoryFilters


@dataclass
class OrderFilters(RepositoryFilters):
    """Filters specific to orders."""

    customer_id: int | None = None
    status: OrderStatus | None = None


class OrderRepository(BaseRepository[Order]):
    """
    Repository for Order aggregates.

    Orders are the only path from a customer to their orders:
    find_by_customer / count_by_customer replace a reverse collection.
    """

    @property
    def model(self) -> type[Order]:
        return Order

    def _base_query(self) -> Select:
        return (
            select(Order)
            .options(selectinload(Order.items).joinedload(OrderItem.product))
            .order_by(Order.order_date.desc(), Order.id.desc())
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, OrderFilters):
            return query

        if filters.customer_id is not None:
            query = query.where(Order.customer_id == filters.customer_id)
        if filters.status is not None:
            query = query.where(Order.status == filters.status)

        return query

    def find_by_number(self, order_number: str) -> Order | None:
        return self._db.scalar(self._base_query().where(Order.order_number == order_number))

    def find_by_customer(self, customer_id: int, limit: int | None = None) -> Sequence[Order]:
        """Orders of a customer, newest first."""
        return self.find_all(OrderFilters(customer_id=customer_id, limit=limit or Limits.MAX_PAGE_SIZE))

    def count_by_customer(self, customer_id: int) -> int:
        query = select(func.count()).select_from(Order).where(Order.customer_id == customer_id)
        return self._db.scalar(query) or 0

    def number_exists(self, order_number: str) -> bool:
        query = select(func.count()).select_from(Order).where(Order.order_number == order_number)
        return (self._db.scalar(query) or 0) > 0

    def add(self, entity: Order) -> Order:
        """Insert an order, allocating an unused order number first."""
        entity.assign_order_number(OrderNumberGenerator(self.number_exists))
        return super().add(entity)


def get_order_repository(db: Session) -> OrderRepository:
    """Factory function for OrderRepository."""
    return OrderRepository(db)
