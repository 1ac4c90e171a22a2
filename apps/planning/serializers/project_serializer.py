from rest_framework import serializers

from apps.planning.models import Project
from apps.planning.models.project_model import PROJECT_KEY_MESSAGE, PROJECT_KEY_PATTERN
from base.serializers import UserBasicSerializer


class CreateProjectRequestSerializer(serializers.Serializer):
    key = serializers.RegexField(
        PROJECT_KEY_PATTERN,
        max_length=10,
        error_messages={"invalid": PROJECT_KEY_MESSAGE},
    )
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(
        max_length=1000, required=False, allow_blank=True, allow_null=True
    )


class UpdateProjectRequestSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(
        max_length=1000, required=False, allow_blank=True, allow_null=True
    )
    is_active = serializers.BooleanField(required=False, default=True)


class ProjectSerializer(serializers.ModelSerializer):
    owner = UserBasicSerializer(read_only=True)
    epic_count = serializers.ReadOnlyField()
    work_item_count = serializers.ReadOnlyField()

    class Meta:
        model = Project
        fields = [
            "id",
            "key",
            "name",
            "description",
            "owner",
            "is_active",
            "is_archived",
            "epic_count",
            "work_item_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
