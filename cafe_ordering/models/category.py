"""
Category Model: hierarchical grouping of products.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cafe_shared.utils.exceptions import InvalidArgumentError

from .base import AuditMixin, Base, IdType

if TYPE_CHECKING:
    from .product import Product


class Category(AuditMixin, Base):
    """
    Product category such as "Hot Drinks" or "Pastries".

    The tree is stored as parent_id references. A category owns its
    subcategories (deleting it deletes them) but only links its products
    (deleting it detaches them).
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    image_url: Mapped[Optional[str]] = mapped_column(String(255))
    parent_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("categories.id", ondelete="CASCADE"), index=True
    )
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    show_in_menu: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relationships
    subcategories: Mapped[list["Category"]] = relationship(
        back_populates="parent",
        cascade="all, delete-orphan",
        order_by="Category.display_order",
    )
    parent: Mapped[Optional["Category"]] = relationship(
        back_populates="subcategories", remote_side="Category.id"
    )
    products: Mapped[list["Product"]] = relationship(order_by="Product.name")

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("display_order", 0)
        kwargs.setdefault("is_active", True)
        kwargs.setdefault("show_in_menu", True)
        super().__init__(**kwargs)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None and self.parent is None

    def is_visible(self) -> bool:
        """Shown on the menu: active, flagged for the menu, and has an active product."""
        return bool(self.is_active and self.show_in_menu and self.active_products())

    def active_products(self) -> list["Product"]:
        return [p for p in self.products if p.is_active]

    # =========================================================================
    # Tree
    # =========================================================================

    def iter_subtree(self) -> Iterator["Category"]:
        """This category followed by every descendant, depth first."""
        yield self
        for child in self.subcategories:
            yield from child.iter_subtree()

    def would_create_cycle(self, child: "Category") -> bool:
        return any(node is self for node in child.iter_subtree())

    def add_subcategory(self, child: "Category") -> None:
        """
        Attach a child category.

        Rejects the category itself and any category whose subtree already
        contains this one, since either would close a cycle. A child that
        already sits under another category must be detached from it first.
        """
        if child is None:
            raise InvalidArgumentError("Subcategory cannot be None")
        if self.would_create_cycle(child):
            raise InvalidArgumentError(
                f"Category '{child.name}' cannot be placed under '{self.name}': it would create a cycle",
                category_id=self.id,
                child_id=child.id,
            )
        if child in self.subcategories:
            return
        if child.parent is not None and child.parent is not self:
            raise InvalidArgumentError(
                f"Category '{child.name}' already belongs to '{child.parent.name}'",
                category_id=self.id,
                child_id=child.id,
                current_parent_id=child.parent.id,
            )
        self.subcategories.append(child)
        if self.id is not None:
            child.parent_id = self.id

    def remove_subcategory(self, child: "Category") -> bool:
        if child not in self.subcategories:
            return False
        self.subcategories.remove(child)
        return True

    def all_products(self) -> list["Product"]:
        """Products of this category and of every subcategory, depth first."""
        return [product for node in self.iter_subtree() for product in node.products]

    # =========================================================================
    # Products (linked, not owned)
    # =========================================================================

    def add_product(self, product: "Product") -> None:
        if product is None:
            raise InvalidArgumentError("Product cannot be None")
        if product not in self.products:
            self.products.append(product)
        if self.id is not None:
            product.category_id = self.id

    def remove_product(self, product: "Product") -> bool:
        if product not in self.products:
            return False
        self.products.remove(product)
        product.category_id = None
        return True

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}', parent_id={self.parent_id})>"
