import logging

from rest_framework import mixins, permissions, status, viewsets
from rest_framework.request import Request
from rest_framework.response import Response

from core_backend.exceptions import get_client_ip
from core_backend.pagination import StandardPagination
from orders.serializers import OrderCreateSerializer, OrderSerializer
from orders.services import OrderService

from .customer_actions import CustomerActionsMixin

logger = logging.getLogger(__name__)


class OrderViewSet(
    CustomerActionsMixin,
    mixins.ListModelMixin,
    viewsets.GenericViewSet,
):
    """
    Customer order endpoints.

    - POST   /orders/               place an order
    - GET    /orders/               the caller's orders, newest first
    - GET    /orders/{id}/          one order (owner or admin)
    - PUT    /orders/{id}/payment/  submit UTR / transaction id
    - PUT    /orders/{id}/cancel/   self-cancel before confirmation
    """

    serializer_class = OrderSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = StandardPagination

    def get_queryset(self):
        return OrderService.list_orders_for_customer(self.request.user)

    def create(self, request: Request) -> Response:
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = OrderService.create_order(
            customer=request.user,
            items=data["items"],
            delivery_type=data["delivery_type"],
            delivery_details=data.get("delivery_details"),
            custom_delivery_time=data.get("custom_delivery_time"),
            ip=get_client_ip(request),
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request: Request, pk=None) -> Response:
        order = OrderService.get_order(pk, request.user)
        return Response(self.get_serializer(order).data)
