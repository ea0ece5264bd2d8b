"""
Orders services package.

- OrderService: order lifecycle (create, payment, verification, fulfilment)
- OrderCalculationService: line snapshots, fees and totals
- OrderFinanceService: stats and payment listings for admins
"""

from .order_service import OrderService
from .calculation_service import OrderCalculationService
from .finance_service import OrderFinanceService

__all__ = [
    "OrderService",
    "OrderCalculationService",
    "OrderFinanceService",
]
