from rest_framework import serializers

from apps.planning.models import WorkItem
from apps.planning.models.epic_model import PRIORITY_DEFAULT, PRIORITY_MAX, PRIORITY_MIN
from base.serializers import ProjectBasicSerializer, UserBasicSerializer


class CreateWorkItemRequestSerializer(serializers.Serializer):
    project_id = serializers.IntegerField(min_value=1)
    epic_id = serializers.IntegerField(required=False, allow_null=True)
    parent_work_item_id = serializers.IntegerField(required=False, allow_null=True)
    type = serializers.ChoiceField(choices=WorkItem.TYPE_CHOICES)
    summary = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    assignee_id = serializers.IntegerField(required=False, allow_null=True)
    reporter_id = serializers.IntegerField(required=False, allow_null=True)
    priority = serializers.IntegerField(
        min_value=PRIORITY_MIN, max_value=PRIORITY_MAX, required=False, default=PRIORITY_DEFAULT
    )
    due_date = serializers.DateTimeField(required=False, allow_null=True)


class UpdateWorkItemRequestSerializer(serializers.Serializer):
    summary = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    assignee_id = serializers.IntegerField(required=False, allow_null=True)
    status_id = serializers.IntegerField()
    priority = serializers.IntegerField(
        min_value=PRIORITY_MIN, max_value=PRIORITY_MAX, required=False, default=PRIORITY_DEFAULT
    )
    due_date = serializers.DateTimeField(required=False, allow_null=True)
    version = serializers.IntegerField(min_value=0, required=False)


class WorkItemListSerializer(serializers.ModelSerializer):
    status_name = serializers.CharField(source="status.name", read_only=True)
    assignee = UserBasicSerializer(read_only=True)
    child_count = serializers.ReadOnlyField()

    class Meta:
        model = WorkItem
        fields = [
            "id",
            "key",
            "type",
            "summary",
            "status_name",
            "assignee",
            "priority",
            "due_date",
            "child_count",
            "updated_at",
        ]
        read_only_fields = fields


class WorkItemSerializer(serializers.ModelSerializer):
    project = ProjectBasicSerializer(read_only=True)
    assignee = UserBasicSerializer(read_only=True)
    reporter = UserBasicSerializer(read_only=True)
    epic_id = serializers.ReadOnlyField()
    epic_key = serializers.CharField(source="epic.key", read_only=True, default=None)
    parent_work_item_id = serializers.ReadOnlyField(source="parent_id")
    parent_work_item_key = serializers.CharField(
        source="parent.key", read_only=True, default=None
    )
    status_id = serializers.ReadOnlyField()
    status_name = serializers.CharField(source="status.name", read_only=True)
    child_count = serializers.ReadOnlyField()

    class Meta:
        model = WorkItem
        fields = [
            "id",
            "project",
            "epic_id",
            "epic_key",
            "parent_work_item_id",
            "parent_work_item_key",
            "key",
            "type",
            "summary",
            "description",
            "status_id",
            "status_name",
            "assignee",
            "reporter",
            "priority",
            "due_date",
            "order_index",
            "version",
            "is_active",
            "child_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
