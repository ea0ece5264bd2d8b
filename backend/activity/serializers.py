from rest_framework import serializers

from .models import Activity


class ActivitySerializer(serializers.ModelSerializer):
    actor_email = serializers.EmailField(source="actor.email", read_only=True, default=None)
    actor_name = serializers.SerializerMethodField()

    class Meta:
        model = Activity
        fields = [
            "id",
            "actor",
            "actor_email",
            "actor_name",
            "action",
            "details",
            "metadata",
            "ip",
            "timestamp",
        ]
        read_only_fields = fields

    def get_actor_name(self, obj):
        if obj.actor is None:
            return "System"
        return obj.actor.get_full_name() or obj.actor.email


class ActivityQuerySerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=Activity.Action.choices, required=False)
    limit = serializers.IntegerField(required=False, min_value=1)
