"""
Tests for request and output serializers.
"""
import pytest

from apps.planning.serializers import (
    BoardSerializer,
    BoardViewSerializer,
    CreateEpicRequestSerializer,
    CreateWorkItemRequestSerializer,
    EpicSerializer,
    MoveWorkItemRequestSerializer,
    ProjectSerializer,
    StatusSerializer,
    StatusTransitionSerializer,
    WorkItemListSerializer,
    WorkItemSerializer,
)
from apps.planning.tests.factories import (
    BoardColumnFactory,
    BoardFactory,
    EpicFactory,
    ProjectFactory,
    StatusFactory,
    StatusTransitionFactory,
    UserFactory,
    WorkItemFactory,
)


class TestRequestSerializers:
    """Test request serializers."""

    def test_epic_defaults(self):
        """Test epic defaults."""
        serializer = CreateEpicRequestSerializer(data={"project_id": 1, "summary": "Epic"})

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["priority"] == 3

    def test_epic_date_order(self):
        """Test epic date order."""
        serializer = CreateEpicRequestSerializer(
            data={
                "project_id": 1,
                "summary": "Epic",
                "start_date": "2025-01-10T00:00:00Z",
                "due_date": "2025-01-01T00:00:00Z",
            }
        )

        assert not serializer.is_valid()
        assert "due_date" in serializer.errors

    def test_work_item_requires_type(self):
        """Test work item requires type."""
        serializer = CreateWorkItemRequestSerializer(data={"project_id": 1, "summary": "Item"})

        assert not serializer.is_valid()
        assert "type" in serializer.errors

    def test_move_request_position(self):
        """Test move request position."""
        assert MoveWorkItemRequestSerializer(data={"to_status_id": 2}).is_valid()
        assert not MoveWorkItemRequestSerializer(
            data={"to_status_id": 2, "position": -1}
        ).is_valid()
        assert not MoveWorkItemRequestSerializer(data={"to_status_id": 0}).is_valid()


@pytest.mark.django_db
class TestOutputSerializers:
    """Test output serializers."""

    def test_project_serializer(self):
        """Test project serializer."""
        owner = UserFactory(first_name="Grace", last_name="Hopper")
        project = ProjectFactory(key="NAVY", owner=owner)

        data = ProjectSerializer(project).data

        assert data["key"] == "NAVY"
        assert data["owner"]["full_name"] == "Grace Hopper"
        assert data["epic_count"] == 0

    def test_epic_serializer_counts(self):
        """Test epic serializer counts."""
        done = StatusFactory(is_completed_status=True)
        epic = EpicFactory(status=done)
        WorkItemFactory(project=epic.project, epic=epic, status=done)
        WorkItemFactory(project=epic.project, epic=epic, status=StatusFactory())

        data = EpicSerializer(epic).data

        assert data["work_item_count"] == 2
        assert data["completed_work_item_count"] == 1
        assert data["project"]["key"] == epic.project.key
        assert data["status_id"] == done.pk

    def test_work_item_serializer(self):
        """Test work item serializer."""
        parent = WorkItemFactory()
        child = WorkItemFactory(
            project=parent.project, status=parent.status, parent=parent, type="subtask"
        )

        data = WorkItemSerializer(child).data

        assert data["parent_work_item_id"] == parent.pk
        assert data["parent_work_item_key"] == parent.key
        assert data["epic_id"] is None
        assert data["epic_key"] is None
        assert data["version"] == 0

    def test_work_item_list_serializer(self):
        """Test the compact work item representation."""
        assignee = UserFactory(first_name="Alan", last_name="Turing")
        parent = WorkItemFactory(assignee=assignee, priority=1)
        WorkItemFactory(
            project=parent.project, status=parent.status, parent=parent, type="subtask"
        )

        data = WorkItemListSerializer(parent).data

        assert data["key"] == parent.key
        assert data["status_name"] == parent.status.name
        assert data["assignee"]["full_name"] == "Alan Turing"
        assert data["priority"] == 1
        assert data["child_count"] == 1
        assert "description" not in data

    def test_status_serializer(self):
        """Test status flags are exposed."""
        status = StatusFactory(name="Shipped", color="#00AA00", is_completed_status=True)

        data = StatusSerializer(status).data

        assert data["name"] == "Shipped"
        assert data["color"] == "#00AA00"
        assert data["is_completed_status"] is True
        assert data["is_default_for_new"] is False
        assert data["is_active"] is True

    def test_board_serializer(self):
        """Test board columns are nested in order with their status colors."""
        board = BoardFactory()
        plain = StatusFactory(name="Plain", color="")
        blue = StatusFactory(name="Blue", color="#0000FF")
        BoardColumnFactory(board=board, status=plain, order_index=1, wip_limit=2)
        BoardColumnFactory(board=board, status=blue, order_index=0)

        data = BoardSerializer(board).data

        assert data["project_id"] == board.project_id
        assert [c["status_name"] for c in data["columns"]] == ["Blue", "Plain"]
        assert data["columns"][0]["status_color"] == "#0000FF"
        assert data["columns"][1]["status_color"] == "#808080"
        assert data["columns"][1]["wip_limit"] == 2
        assert data["columns"][1]["board_id"] == board.pk

    def test_transition_serializer(self):
        """Test transition serializer."""
        transition = StatusTransitionFactory()

        data = StatusTransitionSerializer(transition).data

        assert data["from_status_id"] == transition.from_status_id
        assert data["to_status_name"] == transition.to_status.name

    def test_board_view_serializer(self, project, board_service, backlog, user):
        """Test board view serializer."""
        board_service.create_board(project)
        WorkItemFactory(project=project, status=backlog, assignee=user, order_index=0)

        view = board_service.get_board_view(project)
        data = BoardViewSerializer(view).data

        assert data["total_items"] == 1
        assert data["project_id"] == project.pk
        backlog_column = data["columns"][0]
        assert backlog_column["item_count"] == 1
        assert backlog_column["is_over_wip_limit"] is False
        assert backlog_column["work_items"][0]["assignee_name"] == "Ada Lovelace"
