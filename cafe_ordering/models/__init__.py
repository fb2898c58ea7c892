"""
SQLAlchemy ORM models for the café ordering core.

Every model is imported here so that Base.metadata knows all tables before
create_all() runs.
"""

from .base import AuditMixin, Base, IdType
from .ingredient import Ingredient
from .product import Product, product_ingredients
from .category import Category
from .customer import Customer, LoyaltyProgram
from .order import Order, OrderItem
from .user import Role, User, user_roles

__all__ = [
    # Base
    "Base",
    "AuditMixin",
    "IdType",
    # Catalog
    "Ingredient",
    "Product",
    "product_ingredients",
    "Category",
    # Customers
    "Customer",
    "LoyaltyProgram",
    # Orders
    "Order",
    "OrderItem",
    # Users
    "User",
    "Role",
    "user_roles",
]
