"""
Shared module for infrastructure and utilities used by the ordering core.

STRUCTURE:
- cafe_shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Order statuses, payment methods, tiers, roles, limits

- cafe_shared.infrastructure: Database
  - db.py: SQLAlchemy engine, sessions, safe_commit()

- cafe_shared.security: Authentication collaborator
  - principal.py: UserPrincipal, role authorities, login checks

- cafe_shared.utils: Utilities
  - exceptions.py: HTTP-mapped exceptions with auto-logging
  - money.py: Decimal rounding and non-negativity rules

IMPORT EXAMPLES:
    from cafe_shared.config.settings import settings
    from cafe_shared.config.constants import OrderStatus, PaymentMethod
    from cafe_shared.infrastructure.db import get_db_context, safe_commit
    from cafe_shared.utils.exceptions import InvalidArgumentError, NotFoundError
    from cafe_shared.utils.money import round_money
"""
