import logging

from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from core_backend.exceptions import get_client_ip
from orders.serializers import CancelOrderSerializer, OrderSerializer, SubmitPaymentSerializer
from orders.services import OrderService

logger = logging.getLogger(__name__)


class CustomerActionsMixin:
    """
    Mixin for the owner-only order actions: payment proof and self-cancel.

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=True, methods=["put"], url_path="payment")
    def submit_payment(self, request: Request, pk=None) -> Response:
        serializer = SubmitPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.submit_payment(
            pk,
            request.user,
            utr_number=serializer.validated_data["utr_number"],
            transaction_id=serializer.validated_data.get("transaction_id", ""),
            ip=get_client_ip(request),
        )
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["put"], url_path="cancel")
    def cancel(self, request: Request, pk=None) -> Response:
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.cancel_by_customer(
            pk,
            request.user,
            reason=serializer.validated_data.get("reason"),
            ip=get_client_ip(request),
        )
        return Response(OrderSerializer(order).data)
