"""
Domain Services - Application Layer.

Services load aggregates through repositories, invoke one aggregate
operation, save and commit. Business rules stay on the aggregates.

Structure:
    Service (orchestration)  ← YOU ARE HERE
        ↓
    Repository (data access, version checks)
        ↓
    Model (aggregate)

Usage:
    from cafe_ordering.services.domain import OrderService

    with get_db_context() as db:
        OrderService(db).pay_order(order_id, PaymentMethod.CASH, "till-1")
"""

from .order_service import OrderService
from .inventory_service import InventoryService, LowStockEntry
from .customer_service import CustomerService
from .catalog_service import CatalogService

__all__ = [
    "OrderService",
    "InventoryService",
    "LowStockEntry",
    "CustomerService",
    "CatalogService",
]
