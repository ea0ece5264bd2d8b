from rest_framework import serializers

from core_backend.base import TimestampedSerializer

from .models import Offer


class OfferSerializer(TimestampedSerializer):
    created_by_email = serializers.EmailField(source="created_by.email", read_only=True, default=None)
    is_currently_active = serializers.SerializerMethodField()

    class Meta:
        model = Offer
        fields = [
            "id",
            "title",
            "description",
            "discount_type",
            "discount_value",
            "applicable_to",
            "target_id",
            "is_active",
            "valid_until",
            "is_currently_active",
            "created_by",
            "created_by_email",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_by", "created_by_email", "created_at", "updated_at"]
        select_related_fields = ["created_by"]

    def get_is_currently_active(self, obj):
        return obj.is_currently_active()

    def validate(self, attrs):
        attrs = super().validate(attrs)

        discount_type = attrs.get("discount_type", getattr(self.instance, "discount_type", None))
        discount_value = attrs.get("discount_value", getattr(self.instance, "discount_value", None))
        applicable_to = attrs.get("applicable_to", getattr(self.instance, "applicable_to", Offer.ApplicableTo.ALL))

        if discount_value is not None and discount_value <= 0:
            raise serializers.ValidationError({"discount_value": "Discount value must be greater than zero."})
        if discount_type == Offer.DiscountType.PERCENTAGE and discount_value is not None and discount_value > 100:
            raise serializers.ValidationError({"discount_value": "Percentage discount cannot exceed 100%."})

        if applicable_to == Offer.ApplicableTo.ALL:
            attrs["target_id"] = "all"
        else:
            target = attrs.get("target_id", getattr(self.instance, "target_id", "")) or ""
            if not target.strip() or target == "all":
                raise serializers.ValidationError({"target_id": "A category name or dish id is required."})

        return attrs
