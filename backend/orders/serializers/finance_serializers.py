from rest_framework import serializers

from core_backend.base import BaseModelSerializer
from orders.models import Order


class PaymentRecordSerializer(BaseModelSerializer):
    customer_email = serializers.EmailField(source="customer.email", read_only=True)
    customer_name = serializers.CharField(source="customer.get_full_name", read_only=True)
    verified_by = serializers.EmailField(source="verified_by.email", read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            "id",
            "short_id",
            "customer_email",
            "customer_name",
            "total_amount",
            "utr_number",
            "transaction_id",
            "payment_submitted_at",
            "payment_verified",
            "verified_by",
            "verified_at",
            "status",
            "created_at",
        ]
        read_only_fields = fields
        select_related_fields = ["customer", "verified_by"]
