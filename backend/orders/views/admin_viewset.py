import logging

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from core_backend.pagination import StandardPagination
from orders.serializers import AdminOrderSerializer, PaymentRecordSerializer
from orders.services import OrderFinanceService, OrderService
from users.permissions import IsAdmin

from .status_actions import StatusActionsMixin

logger = logging.getLogger(__name__)


class AdminOrderViewSet(StatusActionsMixin, viewsets.ReadOnlyModelViewSet):
    """
    Staff order management.

    - GET /admin/orders/?status=            all orders, newest first
    - GET /admin/orders/stats/              per-status counts and revenue
    - PUT /admin/orders/{id}/verify-payment/
    - PUT /admin/orders/{id}/status/
    - PUT /admin/orders/{id}/time/
    """

    serializer_class = AdminOrderSerializer
    permission_classes = [IsAdmin]
    pagination_class = StandardPagination

    def get_queryset(self):
        return OrderService.list_orders(status=self.request.query_params.get("status"))

    def retrieve(self, request: Request, pk=None) -> Response:
        order = OrderService.get_order(pk, request.user)
        return Response(self.get_serializer(order).data)

    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request: Request) -> Response:
        return Response(OrderFinanceService.get_order_stats())


class FinanceViewSet(viewsets.GenericViewSet):
    """
    Payment ledger: orders with a UTR, searchable by UTR or transaction id,
    plus total verified revenue.
    """

    serializer_class = PaymentRecordSerializer
    permission_classes = [IsAdmin]

    @action(detail=False, methods=["get"], url_path="payments")
    def payments(self, request: Request) -> Response:
        orders = OrderFinanceService.list_payments(search=request.query_params.get("search"))
        return Response(
            {
                "payments": self.get_serializer(orders, many=True).data,
                "total_revenue": OrderFinanceService.get_verified_revenue(),
            }
        )
