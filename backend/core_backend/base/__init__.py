"""
Core backend base components.

Foundational viewsets and serializers shared by every app.
"""

from .viewsets import BaseViewSet, OptimizedQuerysetMixin
from .serializers import BaseModelSerializer, TimestampedSerializer

__all__ = [
    # ViewSets
    "BaseViewSet",
    "OptimizedQuerysetMixin",
    # Serializers
    "BaseModelSerializer",
    "TimestampedSerializer",
]
