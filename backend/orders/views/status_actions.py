import logging

from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from core_backend.exceptions import get_client_ip
from orders.serializers import AdminOrderSerializer, UpdateEstimatedTimeSerializer, UpdateOrderStatusSerializer
from orders.services import OrderService

logger = logging.getLogger(__name__)


class StatusActionsMixin:
    """
    Mixin for admin order transitions: payment verification, status
    changes and delivery estimates.

    This mixin provides action methods for AdminOrderViewSet.
    """

    @action(detail=True, methods=["put"], url_path="verify-payment")
    def verify_payment(self, request: Request, pk=None) -> Response:
        order = OrderService.verify_payment(pk, request.user, ip=get_client_ip(request))
        return Response(AdminOrderSerializer(order).data)

    @action(detail=True, methods=["put"], url_path="status")
    def update_status(self, request: Request, pk=None) -> Response:
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.update_status(
            pk,
            serializer.validated_data["status"],
            request.user,
            reason=serializer.validated_data.get("reason"),
            ip=get_client_ip(request),
        )
        return Response(AdminOrderSerializer(order).data)

    @action(detail=True, methods=["put"], url_path="time")
    def update_time(self, request: Request, pk=None) -> Response:
        serializer = UpdateEstimatedTimeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.update_estimated_time(
            pk,
            serializer.validated_data["estimated_delivery_time"],
            request.user,
            ip=get_client_ip(request),
        )
        return Response(AdminOrderSerializer(order).data)
