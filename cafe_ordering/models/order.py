"""
Order Models: Order (aggregate root) and OrderItem.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Optional

from sqlalchemy import (
    Boolean, CheckConstraint, DateTime, Enum as SQLEnum, ForeignKey, Index, Integer,
    Numeric, String, event,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from cafe_shared.config.constants import TAX_RATE, OrderStatus, PaymentMethod
from cafe_shared.utils.exceptions import InvalidArgumentError
from cafe_shared.utils.money import (
    ZERO,
    Number,
    percentage_of,
    require_non_negative,
    require_positive_int,
    round_money,
    validate_percentage,
)

from .base import AuditMixin, Base, IdType, utcnow
from .product import Product

if TYPE_CHECKING:
    from .customer import Customer


def _coerce_enum(enum_cls, value, what: str):
    """Accept enum members or their string values."""
    if value is None:
        raise InvalidArgumentError(f"{what} is required")
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidArgumentError(f"Unknown {what}: {value}") from None


class OrderItem(AuditMixin, Base):
    """
    A line of an order.
    Stores the unit price at the time the product was added, so later catalog
    price changes never alter existing orders.
    """

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("products.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    special_instructions: Mapped[Optional[str]] = mapped_column(String(255))
    is_prepared: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    discount_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=ZERO, nullable=False)
    discount_reason: Mapped[Optional[str]] = mapped_column(String(50))

    # Relationships
    product: Mapped["Product"] = relationship(lazy="joined")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_order_item_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="chk_order_item_price_non_negative"),
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("is_prepared", False)
        kwargs.setdefault("discount_amount", ZERO)
        super().__init__(**kwargs)

    # =========================================================================
    # Pricing
    # =========================================================================

    @property
    def base_amount(self) -> Decimal:
        """unit_price × quantity, before the item discount."""
        return self.unit_price * self.quantity

    @property
    def subtotal(self) -> Decimal:
        return self.base_amount - (self.discount_amount if self.discount_amount is not None else ZERO)

    def apply_percentage_discount(self, percentage: Number, reason: str | None) -> Decimal:
        """Discount a percentage of the base amount. Returns the discount."""
        pct = validate_percentage(percentage)
        self.discount_amount = percentage_of(self.base_amount, pct)
        self.discount_reason = reason
        return self.discount_amount

    def apply_fixed_discount(self, amount: Number, reason: str | None) -> Decimal:
        """Discount a fixed amount, never more than the base amount. Returns the discount."""
        discount = require_non_negative(amount, "amount")
        if discount > self.base_amount:
            raise InvalidArgumentError(
                "Discount cannot be greater than the item amount",
                item_id=self.id,
                discount=str(discount),
                base_amount=str(self.base_amount),
            )
        self.discount_amount = discount
        self.discount_reason = reason
        return self.discount_amount

    def remove_discount(self) -> None:
        self.discount_amount = ZERO
        self.discount_reason = None

    def change_quantity(self, quantity: int) -> None:
        """Set a new quantity, clamping an existing discount to the new base amount."""
        require_positive_int(quantity, "quantity")
        self.quantity = quantity
        if self.discount_amount and self.discount_amount > self.base_amount:
            self.discount_amount = self.base_amount

    def mark_as_prepared(self) -> None:
        """One-way: an item cannot be un-prepared."""
        self.is_prepared = True

    def __repr__(self) -> str:
        return (
            f"<OrderItem(id={self.id}, product_id={self.product_id}, "
            f"quantity={self.quantity}, unit_price={self.unit_price})>"
        )


class Order(AuditMixin, Base):
    """
    A customer order.

    Owns its items and every derived amount. After any change to items or
    discounts the amounts are recomputed before the method returns, so
    total_amount == subtotal + tax_amount - discount_amount always holds.
    """

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    # Format: YYYYMMDD-XXXX, assigned once
    order_number: Mapped[Optional[str]] = mapped_column(String(20), unique=True)
    order_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    customer_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("customers.id", ondelete="SET NULL"), index=True
    )
    status: Mapped[OrderStatus] = mapped_column(
        SQLEnum(OrderStatus, name="order_status"),
        default=OrderStatus.CREATED,
        nullable=False,
        index=True,
    )

    # Amounts (derived)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=ZERO, nullable=False)
    tax_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=ZERO, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=ZERO, nullable=False)
    discount_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=ZERO, nullable=False)
    discount_reason: Mapped[Optional[str]] = mapped_column(String(100))

    # Payment
    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        SQLEnum(PaymentMethod, name="payment_method")
    )
    payment_reference: Mapped[Optional[str]] = mapped_column(String(100))
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    notes: Mapped[Optional[str]] = mapped_column(String(500))
    is_takeaway: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    table_number: Mapped[Optional[int]] = mapped_column(Integer)
    loyalty_points_earned: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    loyalty_points_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    items: Mapped[list["OrderItem"]] = relationship(
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
        lazy="selectin",
    )
    customer: Mapped[Optional["Customer"]] = relationship()

    __table_args__ = (
        Index("ix_order_customer_status", "customer_id", "status"),
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("order_date", utcnow())
        kwargs.setdefault("status", OrderStatus.CREATED)
        kwargs.setdefault("subtotal", ZERO)
        kwargs.setdefault("tax_amount", ZERO)
        kwargs.setdefault("total_amount", ZERO)
        kwargs.setdefault("discount_amount", ZERO)
        kwargs.setdefault("is_takeaway", False)
        kwargs.setdefault("loyalty_points_earned", 0)
        kwargs.setdefault("loyalty_points_used", 0)
        super().__init__(**kwargs)

    # =========================================================================
    # Order number
    # =========================================================================

    @validates("order_number")
    def _validate_order_number(self, key: str, value: str | None) -> str | None:
        current = self.order_number
        if current is not None and value != current:
            raise InvalidArgumentError(
                "Order number cannot be changed once assigned",
                order_id=self.id,
                order_number=current,
            )
        return value

    def assign_order_number(self, generate: Callable[[], str]) -> str:
        """Assign a number from the generator unless one is already set."""
        if self.order_number is None:
            self.order_number = generate()
        return self.order_number

    # =========================================================================
    # Items
    # =========================================================================

    @property
    def is_modifiable(self) -> bool:
        """Items and discounts can only change before payment."""
        return self.status == OrderStatus.CREATED

    def _require_modifiable(self) -> None:
        if not self.is_modifiable:
            raise InvalidArgumentError(
                f"Order cannot be modified in status {self.status.value}",
                order_id=self.id,
                status=self.status.value,
            )

    def _require_item(self, item: OrderItem) -> None:
        if item not in self.items:
            raise InvalidArgumentError("Item does not belong to this order", order_id=self.id)

    def add_item(
        self,
        product: Product,
        quantity: int,
        special_instructions: str | None = None,
    ) -> OrderItem:
        """
        Add a product line, snapshotting the product's current price.

        Returns:
            The created OrderItem.
        """
        if product is None:
            raise InvalidArgumentError("Product cannot be None")
        require_positive_int(quantity, "quantity")
        self._require_modifiable()

        item = OrderItem(
            product=product,
            product_id=product.id,
            quantity=quantity,
            unit_price=product.price,
            special_instructions=special_instructions,
        )
        self.items.append(item)
        self.recalculate_amounts()
        return item

    def remove_item(self, item: OrderItem) -> bool:
        """Remove a line. Returns False if the item is not part of this order."""
        if item not in self.items:
            return False
        self._require_modifiable()
        self.items.remove(item)
        self.recalculate_amounts()
        return True

    def update_item_quantity(self, item: OrderItem, new_quantity: int) -> bool:
        """
        Change the quantity of a line; zero or less removes it.

        Returns:
            False if the item is not part of this order.
        """
        if new_quantity <= 0:
            return self.remove_item(item)
        if item not in self.items:
            return False
        self._require_modifiable()
        item.change_quantity(new_quantity)
        self.recalculate_amounts()
        return True

    # =========================================================================
    # Amounts
    # =========================================================================

    def recalculate_amounts(self) -> None:
        """subtotal = Σ item subtotals; tax = 10% half-up; total = subtotal + tax - discount."""
        self.subtotal = sum((item.subtotal for item in self.items), ZERO)
        self.tax_amount = round_money(self.subtotal * TAX_RATE)
        discount = self.discount_amount if self.discount_amount is not None else ZERO
        self.total_amount = self.subtotal + self.tax_amount - discount

    def apply_percentage_discount(self, percentage: Number, reason: str | None) -> Decimal:
        """Discount a percentage of the subtotal. Returns the discount."""
        pct = validate_percentage(percentage)
        self._require_modifiable()
        self.discount_amount = percentage_of(self.subtotal, pct)
        self.discount_reason = reason
        self.recalculate_amounts()
        return self.discount_amount

    def apply_fixed_discount(self, amount: Number, reason: str | None) -> Decimal:
        """Discount a fixed amount, never more than the subtotal. Returns the discount."""
        discount = require_non_negative(amount, "amount")
        if discount > self.subtotal:
            raise InvalidArgumentError(
                "Discount cannot be greater than the order subtotal",
                order_id=self.id,
                discount=str(discount),
                subtotal=str(self.subtotal),
            )
        self._require_modifiable()
        self.discount_amount = discount
        self.discount_reason = reason
        self.recalculate_amounts()
        return self.discount_amount

    def remove_discount(self) -> None:
        self._require_modifiable()
        self.discount_amount = ZERO
        self.discount_reason = None
        self.recalculate_amounts()

    def apply_item_percentage_discount(self, item: OrderItem, percentage: Number, reason: str | None) -> Decimal:
        self._require_item(item)
        self._require_modifiable()
        discount = item.apply_percentage_discount(percentage, reason)
        self.recalculate_amounts()
        return discount

    def apply_item_fixed_discount(self, item: OrderItem, amount: Number, reason: str | None) -> Decimal:
        self._require_item(item)
        self._require_modifiable()
        discount = item.apply_fixed_discount(amount, reason)
        self.recalculate_amounts()
        return discount

    def remove_item_discount(self, item: OrderItem) -> None:
        self._require_item(item)
        self._require_modifiable()
        item.remove_discount()
        self.recalculate_amounts()

    # =========================================================================
    # Payment and status
    # =========================================================================

    def process_payment(self, method: PaymentMethod, reference: str | None) -> None:
        """
        Pay the order: the only way from CREATED to PAID.

        Credits floor(total_amount) loyalty points when the customer is
        enrolled and the method earns points.
        """
        if self.status != OrderStatus.CREATED:
            raise InvalidArgumentError(
                "Cannot process payment for an order that is not in CREATED status",
                order_id=self.id,
                status=self.status.value,
            )
        method = _coerce_enum(PaymentMethod, method, "payment method")

        self.payment_method = method
        self.payment_reference = reference
        self.payment_date = utcnow()
        self.status = OrderStatus.PAID

        self._credit_loyalty_points()

    def _credit_loyalty_points(self) -> None:
        """1 point per whole currency unit of the total, fractions dropped."""
        if self.customer is None or self.payment_method is None:
            return
        if not self.payment_method.is_eligible_for_loyalty_points():
            return

        program = self.customer.loyalty_program
        if program is None:
            return

        points = int(self.total_amount)
        if points <= 0:
            return

        self.loyalty_points_earned = points
        program.add_points(points)

    def update_status(self, new_status: OrderStatus) -> bool:
        """
        Move through the state machine.

        Returns:
            True if the transition was applied, False if it is not allowed.
        """
        new_status = _coerce_enum(OrderStatus, new_status, "order status")
        current = self.status

        if not current.can_progress() and new_status != OrderStatus.REFUNDED:
            return False

        if new_status == OrderStatus.CANCELLED and current.can_cancel():
            self.status = OrderStatus.CANCELLED
            return True

        if new_status == OrderStatus.REFUNDED and current.can_refund():
            self.status = OrderStatus.REFUNDED
            return True

        if current.next_status() == new_status:
            self.status = new_status
            return True

        return False

    # =========================================================================
    # Preparation progress
    # =========================================================================

    @property
    def total_item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def are_all_items_prepared(self) -> bool:
        return bool(self.items) and all(item.is_prepared for item in self.items)

    @property
    def preparation_progress(self) -> int:
        """Percentage (0-100, truncated) of lines marked as prepared."""
        if not self.items:
            return 0
        prepared = sum(1 for item in self.items if item.is_prepared)
        return prepared * 100 // len(self.items)

    def __repr__(self) -> str:
        return (
            f"<Order(id={self.id}, order_number='{self.order_number}', "
            f"status='{self.status.value if self.status else None}', total={self.total_amount})>"
        )


@event.listens_for(Order, "before_insert")
def _assign_order_number_on_insert(mapper, connection, target: Order) -> None:
    """Orders persisted without a number get one at first insert."""
    if target.order_number is None:
        from cafe_ordering.services.order_numbers import generate_order_number

        target.assign_order_number(generate_order_number)
