from rest_framework import serializers

from core_backend.base import TimestampedSerializer

from .models import InventoryItem


class InventoryItemSerializer(TimestampedSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)
    last_updated_by_email = serializers.EmailField(
        source="last_updated_by.email", read_only=True, default=None
    )

    class Meta:
        model = InventoryItem
        fields = [
            "id",
            "name",
            "quantity",
            "unit",
            "min_threshold",
            "category",
            "is_low_stock",
            "last_updated_by",
            "last_updated_by_email",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "last_updated_by", "created_at", "updated_at"]
        select_related_fields = ["last_updated_by"]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value
