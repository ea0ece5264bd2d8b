from rest_framework import serializers


class SubmitPaymentSerializer(serializers.Serializer):
    utr_number = serializers.CharField(max_length=64, allow_blank=True)
    transaction_id = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")


class UpdateOrderStatusSerializer(serializers.Serializer):
    """
    Target status for an admin transition. Whether the status exists and
    whether the move is allowed is decided by OrderService.
    """

    status = serializers.CharField()
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True)


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True)


class UpdateEstimatedTimeSerializer(serializers.Serializer):
    estimated_delivery_time = serializers.IntegerField()
