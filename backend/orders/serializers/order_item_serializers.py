from rest_framework import serializers

from orders.models import OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    line_total = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "dish", "name", "unit_price", "quantity", "emoji", "line_total"]
        read_only_fields = fields


class OrderLineInputSerializer(serializers.Serializer):
    """One requested line. Quantity rules are enforced by OrderService."""

    dish_id = serializers.IntegerField()
    quantity = serializers.IntegerField(default=1)
