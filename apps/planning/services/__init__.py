from .board_projector import BoardColumnView, BoardView, WorkItemCard, project_board
from .board_service import BoardService
from .hierarchy_validator import HierarchyNode, HierarchyValidator, load_nodes
from .key_generator import KeyGenerator
from .planning_engine import EpicProgress, PlanningRuleEngine
from .project_service import ProjectService
from .status_registry import POLICY_CLOSED, POLICY_OPEN, StatusRegistry

__all__ = [
    "BoardColumnView",
    "BoardService",
    "BoardView",
    "EpicProgress",
    "HierarchyNode",
    "HierarchyValidator",
    "KeyGenerator",
    "POLICY_CLOSED",
    "POLICY_OPEN",
    "PlanningRuleEngine",
    "ProjectService",
    "StatusRegistry",
    "WorkItemCard",
    "load_nodes",
    "project_board",
]
