from rest_framework import permissions
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from core_backend.exceptions import get_client_ip
from users.permissions import IsAdmin

from .models import Offer
from .serializers import OfferSerializer
from .services import OfferService


class OfferViewSet(BaseViewSet):
    """
    Admin CRUD for offers. `GET /offers/active/` is public and lists what
    currently applies to menu prices.
    """

    queryset = Offer.objects.all()
    serializer_class = OfferSerializer
    permission_classes = [IsAdmin]
    filterset_fields = ["discount_type", "applicable_to", "is_active"]
    search_fields = ["title", "description", "target_id"]
    ordering = ["-created_at"]

    def get_permissions(self):
        if self.action == "active":
            return [permissions.AllowAny()]
        return super().get_permissions()

    def perform_create(self, serializer):
        serializer.instance = OfferService.create_offer(
            self.request.user, ip=get_client_ip(self.request), **serializer.validated_data
        )

    def perform_update(self, serializer):
        serializer.instance = OfferService.update_offer(
            serializer.instance,
            self.request.user,
            ip=get_client_ip(self.request),
            **serializer.validated_data,
        )

    def perform_destroy(self, instance):
        OfferService.delete_offer(instance, self.request.user, ip=get_client_ip(self.request))

    @action(detail=False, methods=["get"], url_path="active")
    def active(self, request):
        offers = OfferService.get_active_offers()
        return Response(OfferSerializer(offers, many=True).data)
