from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import DishViewSet

app_name = "menu"

router = DefaultRouter()
router.register(r"dishes", DishViewSet, basename="dish")

urlpatterns = [
    path("", include(router.urls)),
]
