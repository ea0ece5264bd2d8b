from rest_framework import serializers

from core_backend.base import BaseModelSerializer
from orders.models import Order

from .order_item_serializers import OrderItemSerializer, OrderLineInputSerializer


class OrderSerializer(BaseModelSerializer):
    """Customer-facing representation of an order."""

    items = OrderItemSerializer(many=True, read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "short_id",
            "status",
            "status_display",
            "delivery_type",
            "items",
            "convenience_fee",
            "total_amount",
            "utr_number",
            "transaction_id",
            "payment_submitted_at",
            "payment_verified",
            "verified_at",
            "delivery_floor",
            "delivery_room",
            "delivery_mobile",
            "special_instructions",
            "estimated_delivery_time",
            "custom_delivery_time",
            "order_placed_at",
            "confirmed_at",
            "preparing_at",
            "out_for_delivery_at",
            "delivered_at",
            "cancelled_at",
            "cancellation_reason",
            "version",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
        prefetch_related_fields = ["items"]


class AdminOrderSerializer(OrderSerializer):
    """Adds customer contact and verifier details for staff screens."""

    customer = serializers.SerializerMethodField()
    verified_by = serializers.EmailField(source="verified_by.email", read_only=True, default=None)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ["customer", "verified_by"]
        read_only_fields = fields
        select_related_fields = ["customer", "verified_by"]

    def get_customer(self, obj):
        customer = obj.customer
        return {
            "id": customer.pk,
            "email": customer.email,
            "name": customer.get_full_name(),
            "mobile": customer.mobile,
        }


class DeliveryDetailsSerializer(serializers.Serializer):
    floor = serializers.CharField(max_length=20, required=False, allow_blank=True)
    room = serializers.CharField(max_length=20, required=False, allow_blank=True)
    mobile = serializers.CharField(max_length=20, required=False, allow_blank=True)
    special_instructions = serializers.CharField(required=False, allow_blank=True)


class OrderCreateSerializer(serializers.Serializer):
    """
    Input for placing an order. Business rules (empty order, quantities,
    availability) are checked by OrderService so they carry domain codes.
    """

    items = OrderLineInputSerializer(many=True, allow_empty=True)
    delivery_type = serializers.CharField(default=Order.DeliveryType.ROOM)
    delivery_details = DeliveryDetailsSerializer(required=False)
    custom_delivery_time = serializers.IntegerField(required=False, allow_null=True)
