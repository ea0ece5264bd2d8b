from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from core_backend.exceptions import get_client_ip
from users.permissions import IsAdmin

from .models import InventoryItem
from .serializers import InventoryItemSerializer
from .services import InventoryService


class InventoryItemViewSet(BaseViewSet):
    queryset = InventoryItem.objects.all()
    serializer_class = InventoryItemSerializer
    permission_classes = [IsAdmin]
    filterset_fields = ["category", "unit"]
    search_fields = ["name"]
    ordering_fields = ["name", "quantity", "category", "updated_at"]
    ordering = ["name"]

    def perform_create(self, serializer):
        serializer.instance = InventoryService.add_item(
            self.request.user, ip=get_client_ip(self.request), **serializer.validated_data
        )

    def perform_update(self, serializer):
        serializer.instance = InventoryService.update_item(
            serializer.instance,
            self.request.user,
            ip=get_client_ip(self.request),
            **serializer.validated_data,
        )

    def perform_destroy(self, instance):
        InventoryService.delete_item(instance, self.request.user, ip=get_client_ip(self.request))

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        serializer = self.get_serializer(InventoryService.list_low_stock(), many=True)
        return Response(serializer.data)
