from django.urls import include, path
from rest_framework import routers

from .admin_views import AdminDashboardViewSet, AdminUserViewSet

app_name = "users-admin"

router = routers.DefaultRouter()
router.register(r"admin/users", AdminUserViewSet, basename="admin-user")
router.register(r"admin/dashboard", AdminDashboardViewSet, basename="admin-dashboard")

urlpatterns = [
    path("", include(router.urls)),
]
