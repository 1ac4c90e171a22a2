"""
Shared serializers for nested representation across apps.
"""
from django.contrib.auth import get_user_model
from rest_framework import serializers

from apps.planning.utils import display_name


class UserBasicSerializer(serializers.ModelSerializer):
    """Basic user info for nested assignee/reporter/owner fields."""

    full_name = serializers.SerializerMethodField()

    class Meta:
        model = get_user_model()
        fields = ["id", "username", "email", "first_name", "last_name", "full_name"]
        read_only_fields = fields

    def get_full_name(self, obj):
        return display_name(obj)


class ProjectBasicSerializer(serializers.ModelSerializer):
    """Basic project info for nested representation."""

    class Meta:
        from apps.planning.models import Project

        model = Project
        fields = ["id", "key", "name", "is_archived"]
        read_only_fields = ["id", "key", "name", "is_archived"]
