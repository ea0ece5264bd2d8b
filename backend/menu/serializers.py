from rest_framework import serializers

from core_backend.base import TimestampedSerializer
from offers.pricing import resolve_price

from .models import Dish


class DishSerializer(TimestampedSerializer):
    class Meta:
        model = Dish
        fields = [
            "id",
            "name",
            "description",
            "price",
            "category",
            "is_available",
            "emoji",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_by", "created_at", "updated_at"]

    def validate_category(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Category is required.")
        return value


class MenuDishSerializer(serializers.ModelSerializer):
    """
    A dish as the customer sees it: catalog data plus the offer-resolved
    price. Pass the active offers as ``context["offers"]``.
    """

    class Meta:
        model = Dish
        fields = ["id", "name", "description", "price", "category", "is_available", "emoji"]
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        resolution = resolve_price(instance, self.context.get("offers", []))
        data["final_price"] = serializers.DecimalField(max_digits=8, decimal_places=2).to_representation(
            resolution.final_price
        )
        data["discounted"] = resolution.discounted
        data["applied_offer"] = resolution.applied_offer_title
        return data
