"""
Order Domain Service.

Loads Order aggregates, runs one aggregate operation, saves with the version
check and commits. Every business rule lives on the aggregate; the service
only resolves ids, guards product availability and logs.
"""

from typing import Sequence

from sqlalchemy.orm import Session

from cafe_shared.config.constants import OrderStatus, PaymentMethod
from cafe_shared.config.logging import get_logger, orders_logger
from cafe_shared.infrastructure.db import safe_commit
from cafe_shared.utils.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    OrderNotFoundError,
    ProductNotAvailableError,
)
from cafe_shared.utils.money import Number
from cafe_ordering.models import Order, OrderItem
from cafe_ordering.repositories import (
    get_customer_repository,
    get_order_repository,
    get_product_repository,
)

logger = get_logger(__name__)


class OrderService:
    """
    Domain service for Order operations.

    Usage:
        service = OrderService(db)
        order = service.create_order(customer_id=7, actor="barista@cafe")
        service.add_item(order.id, product_id=3, quantity=2)
        service.pay_order(order.id, PaymentMethod.CASH, "till-1")
    """

    def __init__(self, db: Session):
        self._db = db
        self._orders = get_order_repository(db)
        self._products = get_product_repository(db)
        self._customers = get_customer_repository(db)

    # =========================================================================
    # Lookups
    # =========================================================================

    def get_order(self, order_id: int) -> Order:
        order = self._orders.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def get_by_number(self, order_number: str) -> Order:
        order = self._orders.find_by_number(order_number)
        if order is None:
            raise NotFoundError("Order", order_number)
        return order

    def list_customer_orders(self, customer_id: int, limit: int | None = None) -> Sequence[Order]:
        return self._orders.find_by_customer(customer_id, limit=limit)

    def _get_item(self, order: Order, item_id: int) -> OrderItem:
        for item in order.items:
            if item.id == item_id:
                return item
        raise NotFoundError("OrderItem", item_id, order_id=order.id)

    def _save(self, order: Order, actor: str | None) -> Order:
        order.set_updated_by(actor)
        self._orders.save(order)
        safe_commit(self._db)
        return order

    # =========================================================================
    # Creation and items
    # =========================================================================

    def create_order(
        self,
        customer_id: int | None = None,
        *,
        is_takeaway: bool = False,
        table_number: int | None = None,
        notes: str | None = None,
        actor: str | None = None,
    ) -> Order:
        customer = None
        if customer_id is not None:
            customer = self._customers.find_by_id(customer_id)
            if customer is None:
                raise NotFoundError("Customer", customer_id)

        order = Order(
            customer=customer,
            is_takeaway=is_takeaway,
            table_number=table_number,
            notes=notes,
        )
        order.set_created_by(actor)
        self._orders.add(order)
        safe_commit(self._db)

        orders_logger.info(
            "Order created",
            order_id=order.id,
            order_number=order.order_number,
            customer_id=customer_id,
        )
        return order

    def add_item(
        self,
        order_id: int,
        product_id: int,
        quantity: int,
        special_instructions: str | None = None,
        actor: str | None = None,
    ) -> OrderItem:
        """
        Add a product to an order.

        Raises:
            ProductNotAvailableError: Product unknown, inactive or out of stock.
        """
        order = self.get_order(order_id)
        product = self._products.find_by_id(product_id)
        if product is None or not product.is_available():
            raise ProductNotAvailableError(product_id, order_id=order_id)

        item = order.add_item(product, quantity, special_instructions)
        self._save(order, actor)

        orders_logger.info(
            "Item added to order",
            order_id=order.id,
            product_id=product_id,
            quantity=quantity,
            subtotal=str(order.subtotal),
        )
        return item

    def remove_item(self, order_id: int, item_id: int, actor: str | None = None) -> Order:
        order = self.get_order(order_id)
        order.remove_item(self._get_item(order, item_id))
        return self._save(order, actor)

    def update_item_quantity(
        self, order_id: int, item_id: int, quantity: int, actor: str | None = None
    ) -> Order:
        """Zero or a negative quantity removes the line."""
        order = self.get_order(order_id)
        order.update_item_quantity(self._get_item(order, item_id), quantity)
        return self._save(order, actor)

    def mark_item_prepared(self, order_id: int, item_id: int, actor: str | None = None) -> Order:
        order = self.get_order(order_id)
        self._get_item(order, item_id).mark_as_prepared()
        self._save(order, actor)

        logger.debug(
            "Item prepared",
            order_id=order.id,
            item_id=item_id,
            progress=order.preparation_progress,
        )
        return order

    # =========================================================================
    # Discounts
    # =========================================================================

    def apply_percentage_discount(
        self, order_id: int, percentage: Number, reason: str | None = None, actor: str | None = None
    ) -> Order:
        order = self.get_order(order_id)
        order.apply_percentage_discount(percentage, reason)
        return self._save(order, actor)

    def apply_fixed_discount(
        self, order_id: int, amount: Number, reason: str | None = None, actor: str | None = None
    ) -> Order:
        order = self.get_order(order_id)
        order.apply_fixed_discount(amount, reason)
        return self._save(order, actor)

    def remove_discount(self, order_id: int, actor: str | None = None) -> Order:
        order = self.get_order(order_id)
        order.remove_discount()
        return self._save(order, actor)

    def apply_item_percentage_discount(
        self,
        order_id: int,
        item_id: int,
        percentage: Number,
        reason: str | None = None,
        actor: str | None = None,
    ) -> Order:
        order = self.get_order(order_id)
        order.apply_item_percentage_discount(self._get_item(order, item_id), percentage, reason)
        return self._save(order, actor)

    def apply_item_fixed_discount(
        self,
        order_id: int,
        item_id: int,
        amount: Number,
        reason: str | None = None,
        actor: str | None = None,
    ) -> Order:
        order = self.get_order(order_id)
        order.apply_item_fixed_discount(self._get_item(order, item_id), amount, reason)
        return self._save(order, actor)

    # =========================================================================
    # Payment and status
    # =========================================================================

    def pay_order(
        self,
        order_id: int,
        method: PaymentMethod,
        reference: str | None = None,
        actor: str | None = None,
    ) -> Order:
        """
        Pay the order; loyalty points are credited by the aggregate.

        When points are credited the customer is saved with its own version
        check, so a balance changed elsewhere since load is never overwritten.

        Raises:
            StaleEntityError: The order or the customer changed since load.
        """
        order = self.get_order(order_id)
        order.process_payment(method, reference)
        if order.loyalty_points_earned:
            order.customer.set_updated_by(actor)
            self._customers.save(order.customer)
        self._save(order, actor)

        orders_logger.info(
            "Order paid",
            order_id=order.id,
            order_number=order.order_number,
            payment_method=order.payment_method.value,
            total=str(order.total_amount),
            loyalty_points_earned=order.loyalty_points_earned,
        )
        return order

    def change_status(self, order_id: int, new_status: OrderStatus, actor: str | None = None) -> Order:
        """
        Apply a state machine transition.

        Raises:
            InvalidTransitionError: The aggregate refused the transition.
        """
        order = self.get_order(order_id)
        previous = order.status
        if not order.update_status(new_status):
            raise InvalidTransitionError(
                "Order",
                previous.value,
                OrderStatus(new_status).value,
                order_id=order.id,
            )
        self._save(order, actor)

        orders_logger.info(
            "Order status changed",
            order_id=order.id,
            from_status=previous.value,
            to_status=order.status.value,
        )
        return order

    def cancel_order(self, order_id: int, actor: str | None = None) -> Order:
        return self.change_status(order_id, OrderStatus.CANCELLED, actor)

    def refund_order(self, order_id: int, actor: str | None = None) -> Order:
        return self.change_status(order_id, OrderStatus.REFUNDED, actor)
