"""
Order number generation.

Format: YYYYMMDD-XXXX, where XXXX are the first four hex digits of a random
UUID4 in uppercase. Numbers are unique through the orders.order_number
constraint; OrderNumberGenerator retries until it finds an unused one.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Callable

from cafe_shared.config.constants import Limits
from cafe_shared.config.logging import orders_logger
from cafe_shared.config.settings import settings
from cafe_shared.utils.exceptions import InternalError

from cafe_ordering.models.base import utcnow


def generate_order_number(now: datetime | None = None) -> str:
    """Build a candidate order number for the given (or current) date."""
    now = now or utcnow()
    suffix = uuid.uuid4().hex[: Limits.ORDER_NUMBER_SUFFIX_LENGTH].upper()
    return f"{now:%Y%m%d}-{suffix}"


class OrderNumberGenerator:
    """
    Callable producing order numbers not yet taken.

    Usage:
        generator = OrderNumberGenerator(repo.number_exists)
        order.assign_order_number(generator)
    """

    def __init__(
        self,
        exists: Callable[[str], bool],
        max_attempts: int | None = None,
        candidate: Callable[[], str] = generate_order_number,
    ):
        self._exists = exists
        self._max_attempts = max_attempts or settings.order_number_max_attempts
        self._candidate = candidate

    def __call__(self) -> str:
        for attempt in range(1, self._max_attempts + 1):
            number = self._candidate()
            if not self._exists(number):
                return number
            orders_logger.debug("Order number collision", order_number=number, attempt=attempt)

        raise InternalError(
            "Could not allocate a unique order number",
            attempts=self._max_attempts,
        )
