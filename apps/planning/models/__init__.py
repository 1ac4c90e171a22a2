from .board_model import Board, BoardColumn
from .epic_model import Epic
from .key_counter_model import ProjectKeyCounter
from .project_model import Project
from .work_item_model import WorkItem
from .workflow_state_model import Status, StatusTransition

__all__ = [
    "Project",
    "ProjectKeyCounter",
    "Status",
    "StatusTransition",
    "Epic",
    "WorkItem",
    "Board",
    "BoardColumn",
]
