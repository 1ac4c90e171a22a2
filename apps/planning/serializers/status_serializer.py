from rest_framework import serializers

from apps.planning.models import Status, StatusTransition
from apps.planning.models.workflow_state_model import COLOR_MESSAGE, COLOR_PATTERN


class CreateStatusRequestSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=50)
    color = serializers.RegexField(
        COLOR_PATTERN,
        max_length=20,
        required=False,
        allow_blank=True,
        allow_null=True,
        error_messages={"invalid": COLOR_MESSAGE},
    )
    order_index = serializers.IntegerField(min_value=0, required=False, default=0)
    is_default_for_new = serializers.BooleanField(required=False, default=False)
    is_completed_status = serializers.BooleanField(required=False, default=False)
    is_cancelled_status = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        if attrs.get("is_completed_status") and attrs.get("is_cancelled_status"):
            raise serializers.ValidationError(
                {"is_cancelled_status": "A status cannot be both completed and cancelled"}
            )
        return attrs


class UpdateStatusRequestSerializer(CreateStatusRequestSerializer):
    is_active = serializers.BooleanField(required=False, default=True)


class CreateStatusTransitionRequestSerializer(serializers.Serializer):
    from_status_id = serializers.IntegerField(min_value=1)
    to_status_id = serializers.IntegerField(min_value=1)
    is_allowed = serializers.BooleanField(required=False, default=True)


class StatusSerializer(serializers.ModelSerializer):
    class Meta:
        model = Status
        fields = [
            "id",
            "name",
            "color",
            "order_index",
            "is_default_for_new",
            "is_completed_status",
            "is_cancelled_status",
            "is_active",
            "created_at",
        ]
        read_only_fields = fields


class StatusTransitionSerializer(serializers.ModelSerializer):
    from_status_id = serializers.ReadOnlyField()
    to_status_id = serializers.ReadOnlyField()
    from_status_name = serializers.CharField(source="from_status.name", read_only=True)
    to_status_name = serializers.CharField(source="to_status.name", read_only=True)

    class Meta:
        model = StatusTransition
        fields = [
            "id",
            "from_status_id",
            "from_status_name",
            "to_status_id",
            "to_status_name",
            "is_allowed",
            "created_at",
        ]
        read_only_fields = fields
