from rest_framework import serializers

from apps.planning.models import Board, BoardColumn


class CreateBoardRequestSerializer(serializers.Serializer):
    name = serializers.CharField(
        max_length=200, required=False, allow_blank=True, allow_null=True
    )
    description = serializers.CharField(
        max_length=1000, required=False, allow_blank=True, allow_null=True
    )


class UpdateBoardRequestSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(
        max_length=1000, required=False, allow_blank=True, allow_null=True
    )


class UpdateBoardColumnRequestSerializer(serializers.Serializer):
    wip_limit = serializers.IntegerField(
        min_value=0,
        required=False,
        allow_null=True,
        error_messages={"min_value": "WIP limit must be non-negative"},
    )
    is_collapsed = serializers.BooleanField()


class ReorderColumnsRequestSerializer(serializers.Serializer):
    column_ids = serializers.ListField(
        child=serializers.IntegerField(),
        min_length=1,
        error_messages={"min_length": "At least one column ID is required"},
    )

    def validate_column_ids(self, value):
        if len(set(value)) != len(value):
            raise serializers.ValidationError("Column IDs must not repeat")
        return value


class MoveWorkItemRequestSerializer(serializers.Serializer):
    to_status_id = serializers.IntegerField(
        min_value=1,
        error_messages={"min_value": "Status ID must be greater than 0"},
    )
    position = serializers.IntegerField(min_value=0, required=False, allow_null=True)


class ReorderColumnItemsRequestSerializer(serializers.Serializer):
    work_item_ids = serializers.ListField(child=serializers.IntegerField())

    def validate_work_item_ids(self, value):
        if len(set(value)) != len(value):
            raise serializers.ValidationError("Work item IDs must not repeat")
        return value


class BoardColumnSerializer(serializers.ModelSerializer):
    board_id = serializers.ReadOnlyField()
    status_id = serializers.ReadOnlyField()
    status_name = serializers.CharField(source="status.name", read_only=True)
    status_color = serializers.ReadOnlyField(source="color")

    class Meta:
        model = BoardColumn
        fields = [
            "id",
            "board_id",
            "status_id",
            "status_name",
            "status_color",
            "order_index",
            "wip_limit",
            "is_collapsed",
        ]
        read_only_fields = fields


class BoardSerializer(serializers.ModelSerializer):
    project_id = serializers.ReadOnlyField()
    columns = BoardColumnSerializer(many=True, read_only=True)

    class Meta:
        model = Board
        fields = [
            "id",
            "project_id",
            "name",
            "description",
            "columns",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class WorkItemCardSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    key = serializers.CharField()
    summary = serializers.CharField()
    assignee_name = serializers.CharField(allow_null=True)
    type = serializers.CharField()
    priority = serializers.IntegerField()
    status_id = serializers.IntegerField()
    order_index = serializers.IntegerField(allow_null=True)


class BoardColumnViewSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    status_id = serializers.IntegerField()
    status_name = serializers.CharField()
    status_color = serializers.CharField()
    order_index = serializers.IntegerField()
    wip_limit = serializers.IntegerField(allow_null=True)
    is_collapsed = serializers.BooleanField()
    is_over_wip_limit = serializers.BooleanField()
    item_count = serializers.IntegerField()
    work_items = WorkItemCardSerializer(many=True)


class BoardViewSerializer(serializers.Serializer):
    board_id = serializers.IntegerField()
    project_id = serializers.IntegerField()
    name = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    total_items = serializers.IntegerField()
    columns = BoardColumnViewSerializer(many=True)
