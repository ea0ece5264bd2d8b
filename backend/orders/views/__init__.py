"""
Orders views package - modular view layer with mixins.
"""

from .order_viewset import OrderViewSet
from .admin_viewset import AdminOrderViewSet, FinanceViewSet

__all__ = [
    "OrderViewSet",
    "AdminOrderViewSet",
    "FinanceViewSet",
]
