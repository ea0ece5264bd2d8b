from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import InventoryItemViewSet

app_name = "inventory"

router = DefaultRouter()
router.register(r"inventory", InventoryItemViewSet, basename="inventory-item")

urlpatterns = [
    path("", include(router.urls)),
]
