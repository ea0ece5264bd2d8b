from django.urls import path, include
from rest_framework import routers

from .views import AdminOrderViewSet, FinanceViewSet, OrderViewSet

app_name = "orders"

router = routers.DefaultRouter()
router.register(r"orders", OrderViewSet, basename="order")
router.register(r"admin/orders", AdminOrderViewSet, basename="admin-order")
router.register(r"admin/finance", FinanceViewSet, basename="admin-finance")

urlpatterns = [
    path("", include(router.urls)),
]
