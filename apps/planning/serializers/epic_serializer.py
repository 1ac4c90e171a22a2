from rest_framework import serializers

from apps.planning.models import Epic
from apps.planning.models.epic_model import PRIORITY_DEFAULT, PRIORITY_MAX, PRIORITY_MIN
from base.serializers import ProjectBasicSerializer, UserBasicSerializer


def validate_date_range(attrs, start_field, end_field):
    start = attrs.get(start_field)
    end = attrs.get(end_field)
    if start and end and start > end:
        raise serializers.ValidationError(
            {end_field: f"{end_field} cannot be earlier than {start_field}"}
        )
    return attrs


class CreateEpicRequestSerializer(serializers.Serializer):
    project_id = serializers.IntegerField(min_value=1)
    summary = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    assignee_id = serializers.IntegerField(required=False, allow_null=True)
    status_id = serializers.IntegerField(required=False, allow_null=True)
    priority = serializers.IntegerField(
        min_value=PRIORITY_MIN, max_value=PRIORITY_MAX, required=False, default=PRIORITY_DEFAULT
    )
    start_date = serializers.DateTimeField(required=False, allow_null=True)
    due_date = serializers.DateTimeField(required=False, allow_null=True)

    def validate(self, attrs):
        return validate_date_range(attrs, "start_date", "due_date")


class UpdateEpicRequestSerializer(serializers.Serializer):
    summary = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    assignee_id = serializers.IntegerField(required=False, allow_null=True)
    status_id = serializers.IntegerField()
    priority = serializers.IntegerField(
        min_value=PRIORITY_MIN, max_value=PRIORITY_MAX, required=False, default=PRIORITY_DEFAULT
    )
    start_date = serializers.DateTimeField(required=False, allow_null=True)
    due_date = serializers.DateTimeField(required=False, allow_null=True)

    def validate(self, attrs):
        return validate_date_range(attrs, "start_date", "due_date")


class EpicSerializer(serializers.ModelSerializer):
    project = ProjectBasicSerializer(read_only=True)
    assignee = UserBasicSerializer(read_only=True)
    status_id = serializers.ReadOnlyField()
    status_name = serializers.CharField(source="status.name", read_only=True)
    work_item_count = serializers.ReadOnlyField()
    completed_work_item_count = serializers.ReadOnlyField()

    class Meta:
        model = Epic
        fields = [
            "id",
            "project",
            "key",
            "summary",
            "description",
            "assignee",
            "status_id",
            "status_name",
            "priority",
            "start_date",
            "due_date",
            "is_active",
            "work_item_count",
            "completed_work_item_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
