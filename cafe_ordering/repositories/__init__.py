"""
Repository Pattern implementation.
Centralizes data access, eager loading, version checks and the translation
of unique-constraint violations into DuplicateEntityError.

Usage:
    from cafe_ordering.repositories import get_order_repository

    repo = get_order_repository(db)
    order = repo.find_by_id(123)
    repo.save(order)  # StaleEntityError if someone else saved it first
"""

from .base import BaseRepository, RepositoryFilters
from .order import OrderRepository, OrderFilters, get_order_repository
from .product import ProductRepository, ProductFilters, get_product_repository
from .ingredient import IngredientRepository, get_ingredient_repository
from .category import CategoryRepository, get_category_repository
from .customer import CustomerRepository, get_customer_repository
from .user import UserRepository, RoleRepository, get_user_repository, get_role_repository

__all__ = [
    # Base
    "BaseRepository",
    "RepositoryFilters",
    # Order
    "OrderRepository",
    "OrderFilters",
    "get_order_repository",
    # Product
    "ProductRepository",
    "ProductFilters",
    "get_product_repository",
    # Ingredient
    "IngredientRepository",
    "get_ingredient_repository",
    # Category
    "CategoryRepository",
    "get_category_repository",
    # Customer
    "CustomerRepository",
    "get_customer_repository",
    # User
    "UserRepository",
    "RoleRepository",
    "get_user_repository",
    "get_role_repository",
]
