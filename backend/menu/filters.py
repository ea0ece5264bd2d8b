from django_filters import rest_framework as filters

from .models import Dish


class DishFilter(filters.FilterSet):
    category = filters.CharFilter(field_name="category", lookup_expr="iexact")

    class Meta:
        model = Dish
        fields = ["category", "is_available"]
