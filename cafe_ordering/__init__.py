"""
Café ordering core.

STRUCTURE:
- cafe_ordering.models: Aggregates (Order, Product, Ingredient, Category,
  Customer/LoyaltyProgram, User/Role)
- cafe_ordering.repositories: Persistence with version checks and
  uniqueness translation
- cafe_ordering.services: Order numbers and application services
"""

__version__ = "1.0.0"
