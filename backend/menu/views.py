from rest_framework import permissions
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from core_backend.exceptions import get_client_ip
from offers.services import OfferService
from users.permissions import IsAdminOrReadOnly

from .filters import DishFilter
from .models import Dish
from .serializers import DishSerializer, MenuDishSerializer
from .services import DishService


class DishViewSet(BaseViewSet):
    """
    Catalog management. Reads are public; writes are admin-only and
    recorded in the activity log.

    `GET /dishes/menu/` returns available dishes with offer-resolved prices.
    """

    queryset = Dish.objects.all()
    serializer_class = DishSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_class = DishFilter
    search_fields = ["name", "description", "category"]
    ordering_fields = ["name", "price", "category", "created_at"]
    ordering = ["category", "name"]

    def perform_create(self, serializer):
        serializer.instance = DishService.create_dish(
            self.request.user, ip=get_client_ip(self.request), **serializer.validated_data
        )

    def perform_update(self, serializer):
        serializer.instance = DishService.update_dish(
            serializer.instance,
            self.request.user,
            ip=get_client_ip(self.request),
            **serializer.validated_data,
        )

    def perform_destroy(self, instance):
        DishService.delete_dish(instance, self.request.user, ip=get_client_ip(self.request))

    @action(detail=False, methods=["get"], url_path="menu", permission_classes=[permissions.AllowAny])
    def menu(self, request):
        dishes = DishService.list_available()
        category = request.query_params.get("category")
        if category:
            dishes = dishes.filter(category__iexact=category)

        serializer = MenuDishSerializer(
            dishes, many=True, context={"request": request, "offers": OfferService.get_active_offers()}
        )
        return Response(serializer.data)
