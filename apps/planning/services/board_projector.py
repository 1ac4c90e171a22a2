"""
Kanban projection of a project's work items.

``project_board`` is a pure function: it reads the board, its columns and the
work items it is handed and builds a ``BoardView`` without touching the
database. Filtering, loading and persistence belong to ``BoardService``.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from apps.planning.utils import display_name


@dataclass
class WorkItemCard:
    id: int
    key: str
    summary: str
    assignee_name: Optional[str]
    type: str
    priority: int
    status_id: int
    order_index: Optional[int]


@dataclass
class BoardColumnView:
    id: int
    status_id: int
    status_name: str
    status_color: str
    order_index: int
    wip_limit: Optional[int]
    is_collapsed: bool
    work_items: List[WorkItemCard] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        return len(self.work_items)

    @property
    def is_over_wip_limit(self) -> bool:
        # Advisory only: moves are never refused for exceeding the limit.
        return self.wip_limit is not None and self.item_count > self.wip_limit


@dataclass
class BoardView:
    board_id: int
    project_id: int
    name: str
    description: str
    columns: List[BoardColumnView] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return sum(column.item_count for column in self.columns)

    def column_for_status(self, status_id) -> Optional[BoardColumnView]:
        return next((c for c in self.columns if c.status_id == status_id), None)


def card_sort_key(item):
    """Order by position ascending, unpositioned items last, then by id."""
    return (item.order_index is None, item.order_index or 0, item.id)


def to_card(item) -> WorkItemCard:
    return WorkItemCard(
        id=item.id,
        key=item.key,
        summary=item.summary,
        assignee_name=display_name(item.assignee),
        type=item.type,
        priority=item.priority,
        status_id=item.status_id,
        order_index=item.order_index,
    )


def project_board(project, board, columns, work_items) -> BoardView:
    """
    Group ``work_items`` into the board's ``columns`` by status.

    Columns come out in ``order_index`` order (id breaks ties). Items whose
    status has no column on the board are left out of the view, and columns
    with no matching items stay empty.
    """
    by_status = {}
    for item in sorted(work_items, key=card_sort_key):
        by_status.setdefault(item.status_id, []).append(to_card(item))

    column_views = [
        BoardColumnView(
            id=column.id,
            status_id=column.status_id,
            status_name=column.status.name,
            status_color=column.color,
            order_index=column.order_index,
            wip_limit=column.wip_limit,
            is_collapsed=column.is_collapsed,
            work_items=by_status.get(column.status_id, []),
        )
        for column in sorted(columns, key=lambda c: (c.order_index, c.id))
    ]

    return BoardView(
        board_id=board.id,
        project_id=project.id,
        name=board.name,
        description=board.description or "",
        columns=column_views,
    )
