from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend
from ..pagination import StandardPagination


class OptimizedQuerysetMixin:
    """
    Applies `select_related_fields` / `prefetch_related_fields` declared on
    the serializer Meta of the current action.
    """

    def get_queryset(self):
        queryset = super().get_queryset()
        meta = getattr(self.get_serializer_class(), "Meta", None)

        select_related = getattr(meta, "select_related_fields", None)
        if select_related:
            queryset = queryset.select_related(*select_related)

        prefetch_related = getattr(meta, "prefetch_related_fields", None)
        if prefetch_related:
            queryset = queryset.prefetch_related(*prefetch_related)

        return queryset


class BaseViewSet(OptimizedQuerysetMixin, viewsets.ModelViewSet):
    """
    Base ViewSet that provides standard configuration for all ModelViewSets.

    Features:
    - Automatic query optimization via OptimizedQuerysetMixin
    - Standard pagination, filtering, search and ordering

    Usage:
        class DishViewSet(BaseViewSet):
            queryset = Dish.objects.all()
            serializer_class = DishSerializer
    """

    pagination_class = StandardPagination

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]

    # Default ordering (can be overridden)
    ordering = ["-id"]
