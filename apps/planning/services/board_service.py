import logging

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from apps.planning.exceptions import NotFound, PlanningValidationError
from apps.planning.models import Board, BoardColumn, WorkItem
from apps.planning.serializers import (
    CreateBoardRequestSerializer,
    MoveWorkItemRequestSerializer,
    ReorderColumnItemsRequestSerializer,
    ReorderColumnsRequestSerializer,
    UpdateBoardColumnRequestSerializer,
    UpdateBoardRequestSerializer,
)

from .board_projector import card_sort_key, project_board
from .planning_engine import PlanningRuleEngine
from .validation import require_permission, validate_request

logger = logging.getLogger(__name__)


class BoardService:
    """
    Kanban board configuration and drag-and-drop placement.

    Status changes go through the rule engine; this service only adds the
    board-specific bookkeeping of column and card positions, which are kept
    as contiguous 0-based sequences.
    """

    def __init__(self, engine=None, clock=timezone.now):
        self.engine = engine or PlanningRuleEngine(clock=clock)
        self.clock = clock

    @property
    def registry(self):
        return self.engine.registry

    # Board

    @transaction.atomic
    def create_board(self, project, data=None, permitted=True):
        require_permission(permitted, "Only the project owner can create a board")
        attrs = validate_request(CreateBoardRequestSerializer, data or {})
        self.engine.ensure_writable(project)

        if Board.objects.filter(project=project).exists():
            raise PlanningValidationError(
                f"A board already exists for project '{project.name}'"
            )

        now = self.clock()
        board = Board.objects.create(
            project=project,
            name=attrs.get("name") or f"{project.name} Board",
            description=attrs.get("description") or "",
            created_at=now,
            updated_at=now,
        )
        BoardColumn.objects.bulk_create(
            BoardColumn(board=board, status=status, order_index=index)
            for index, status in enumerate(self.registry.active_statuses())
        )

        logger.info(f"Board created for project {project.key} with {board.column_count} columns")
        return board

    def get_board(self, project):
        try:
            return Board.objects.select_related("project").get(project=project)
        except Board.DoesNotExist:
            raise NotFound(f"Board for project ID {project.pk} not found")

    @transaction.atomic
    def update_board(self, project, data, permitted=True):
        require_permission(permitted, "Only the project owner can update the board")
        board = self.get_board(project)
        attrs = validate_request(UpdateBoardRequestSerializer, data)

        board.name = attrs["name"]
        board.description = attrs.get("description") or ""
        board.updated_at = self.clock()
        board.save(update_fields=["name", "description", "updated_at"])
        return board

    @transaction.atomic
    def delete_board(self, project, permitted=True):
        require_permission(permitted, "Only the project owner can delete the board")
        board = self.get_board(project)
        logger.info(f"Board deleted for project {project.key}")
        board.delete()

    # Columns

    def get_columns(self, board):
        return list(
            BoardColumn.objects.filter(board=board)
            .select_related("status")
            .order_by("order_index", "id")
        )

    def get_column(self, board, column_id):
        try:
            return BoardColumn.objects.select_related("status").get(pk=column_id, board=board)
        except BoardColumn.DoesNotExist:
            raise NotFound(f"Column with ID {column_id} not found in this board")

    @transaction.atomic
    def update_column(self, project, column_id, data, permitted=True):
        require_permission(permitted, "Only the project owner can update board columns")
        board = self.get_board(project)
        column = self.get_column(board, column_id)
        attrs = validate_request(UpdateBoardColumnRequestSerializer, data)

        column.wip_limit = attrs.get("wip_limit")
        column.is_collapsed = attrs["is_collapsed"]
        column.save(update_fields=["wip_limit", "is_collapsed"])
        return column

    @transaction.atomic
    def reorder_columns(self, project, data, permitted=True):
        require_permission(permitted, "Only the project owner can reorder board columns")
        board = self.get_board(project)
        column_ids = validate_request(ReorderColumnsRequestSerializer, data)["column_ids"]

        columns = {column.pk: column for column in self.get_columns(board)}
        if len(column_ids) != len(columns):
            raise PlanningValidationError(
                f"Column count mismatch: expected {len(columns)}, got {len(column_ids)}"
            )
        for column_id in column_ids:
            if column_id not in columns:
                raise PlanningValidationError(
                    f"Column with ID {column_id} does not belong to this board"
                )

        for index, column_id in enumerate(column_ids):
            column = columns[column_id]
            if column.order_index != index:
                column.order_index = index
                column.save(update_fields=["order_index"])

        return self.get_columns(board)

    # Cards

    def get_board_view(self, project, epic_ids=None, assignee_ids=None, search_text=None):
        board = self.get_board(project)

        work_items = WorkItem.objects.filter(project=project, is_active=True).select_related(
            "assignee"
        )
        if epic_ids:
            work_items = work_items.filter(epic_id__in=epic_ids)
        if assignee_ids:
            work_items = work_items.filter(assignee_id__in=assignee_ids)
        if search_text and search_text.strip():
            text = search_text.strip()
            work_items = work_items.filter(Q(key__icontains=text) | Q(summary__icontains=text))

        return project_board(project, board, self.get_columns(board), list(work_items))

    @transaction.atomic
    def move_work_item(self, project, item_id, to_status_id, position=None, permitted=True):
        """
        Drop a card into the column of ``to_status_id`` at ``position``.

        The status change is checked by the rule engine. Without a position
        the card is appended to the end of the destination column. Source and
        destination columns are both re-sequenced from 0.
        """
        require_permission(permitted)
        self.engine.ensure_writable(project)
        attrs = validate_request(
            MoveWorkItemRequestSerializer,
            {"to_status_id": to_status_id, "position": position},
        )
        item = self.engine.get_work_item(item_id)
        if item.project_id != project.pk:
            raise NotFound(f"Work item with ID {item_id} not found in project {project.key}")

        board = self.get_board(project)
        to_status = self.registry.get_status(attrs["to_status_id"])
        if not board.columns.filter(status=to_status).exists():
            raise PlanningValidationError(
                f"Status '{to_status.name}' has no column on this board"
            )

        from_status_id = item.status_id
        destination = [
            other for other in self._column_items(project, to_status.pk) if other.pk != item.pk
        ]
        index = attrs.get("position")
        if index is None or index > len(destination):
            index = len(destination)

        item = self.engine.move_work_item(
            item.pk, to_status.pk, permitted=permitted, order_index=index
        )

        destination.insert(index, item)
        self._resequence(destination)
        if from_status_id != to_status.pk:
            self._resequence(self._column_items(project, from_status_id))

        logger.info(f"Work item {item.key} placed at {index} in '{to_status.name}'")
        return item

    @transaction.atomic
    def reorder_column_items(self, project, column_id, data, permitted=True):
        require_permission(permitted, "Only the project owner can reorder board cards")
        self.engine.ensure_writable(project)
        board = self.get_board(project)
        column = self.get_column(board, column_id)
        item_ids = validate_request(ReorderColumnItemsRequestSerializer, data)["work_item_ids"]

        items = {item.pk: item for item in self._column_items(project, column.status_id)}
        if set(item_ids) != set(items):
            raise PlanningValidationError(
                "Work item IDs must list every card of the column exactly once"
            )

        ordered = [items[item_id] for item_id in item_ids]
        self._resequence(ordered)
        return ordered

    def _column_items(self, project, status_id):
        items = WorkItem.objects.filter(project=project, status_id=status_id, is_active=True)
        return sorted(items, key=card_sort_key)

    def _resequence(self, items):
        for index, item in enumerate(items):
            if item.order_index != index:
                WorkItem.objects.filter(pk=item.pk).update(order_index=index)
                item.order_index = index
