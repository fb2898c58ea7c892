"""
Services: order number generation and the domain services.

Domain services live in cafe_ordering.services.domain and are not imported
here, so the models can reach order_numbers without pulling in the
repositories.
"""

from .order_numbers import OrderNumberGenerator, generate_order_number

__all__ = [
    "OrderNumberGenerator",
    "generate_order_number",
]
