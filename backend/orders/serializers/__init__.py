"""
Orders serializers package - modular serializer layer.
"""

# Order item serializers
from .order_item_serializers import OrderItemSerializer, OrderLineInputSerializer

# Order serializers
from .order_serializers import (
    AdminOrderSerializer,
    DeliveryDetailsSerializer,
    OrderCreateSerializer,
    OrderSerializer,
)

# Status / payment action serializers
from .status_serializers import (
    CancelOrderSerializer,
    SubmitPaymentSerializer,
    UpdateEstimatedTimeSerializer,
    UpdateOrderStatusSerializer,
)

# Finance serializers
from .finance_serializers import PaymentRecordSerializer

__all__ = [
    "OrderItemSerializer",
    "OrderLineInputSerializer",
    "AdminOrderSerializer",
    "DeliveryDetailsSerializer",
    "OrderCreateSerializer",
    "OrderSerializer",
    "CancelOrderSerializer",
    "SubmitPaymentSerializer",
    "UpdateEstimatedTimeSerializer",
    "UpdateOrderStatusSerializer",
    "PaymentRecordSerializer",
]
