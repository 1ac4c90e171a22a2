"""
Structural rules for the work item parent/child hierarchy.

Work items reference their parent by id only. The validator works on an
arena of ``HierarchyNode`` records keyed by id, loaded once per operation,
and walks ancestor chains with explicit lookups against that arena.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Optional

from django.conf import settings

from apps.planning.exceptions import CircularHierarchy, InvalidHierarchy
from apps.planning.models import WorkItem

logger = logging.getLogger(__name__)

SUBTASK_PARENT_TYPES = (WorkItem.TYPE_TASK,)


@dataclass(frozen=True)
class HierarchyNode:
    id: int
    project_id: int
    parent_id: Optional[int] = None
    type: str = WorkItem.TYPE_TASK


def load_nodes(project) -> Dict[int, HierarchyNode]:
    """Build the hierarchy arena for every work item of ``project``."""
    rows = WorkItem.objects.filter(project=project).values_list(
        "id", "project_id", "parent_id", "type"
    )
    return {row[0]: HierarchyNode(*row) for row in rows}


class HierarchyValidator:
    def __init__(self, max_depth=None):
        if max_depth is None:
            max_depth = getattr(settings, "PLANNING_MAX_SUBTASK_DEPTH", 1)
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.max_depth = max_depth

    def validate_parent(self, candidate_id, proposed_parent_id, nodes, project_id):
        """
        Check that ``candidate_id`` may be placed under ``proposed_parent_id``.

        ``candidate_id`` is ``None`` for an item that does not exist yet.
        Raises InvalidHierarchy or CircularHierarchy; returns None when the
        placement is legal.
        """
        if proposed_parent_id is None:
            return

        parent = nodes.get(proposed_parent_id)
        if parent is None:
            raise InvalidHierarchy(
                f"Parent work item with ID {proposed_parent_id} not found in this project"
            )
        if parent.project_id != project_id:
            raise InvalidHierarchy("Parent work item does not belong to the same project")

        parent_depth = self.depth_of(proposed_parent_id, nodes)
        if parent_depth >= self.max_depth:
            raise InvalidHierarchy(
                "Maximum nesting level exceeded. "
                f"Only {self.max_depth} level(s) of nesting are allowed."
            )

        self._ensure_acyclic(candidate_id, proposed_parent_id, nodes)

        if candidate_id is not None:
            subtree_height = self.height_of(candidate_id, nodes)
            if parent_depth + 1 + subtree_height > self.max_depth:
                raise InvalidHierarchy(
                    "Maximum nesting level exceeded by the work item's own children."
                )

    def validate_parent_type(self, child_type, parent_type):
        if child_type != WorkItem.TYPE_SUBTASK:
            raise InvalidHierarchy(
                f"{child_type.capitalize()} work items cannot have a parent. "
                "Only subtasks can have parents."
            )
        if parent_type not in SUBTASK_PARENT_TYPES:
            raise InvalidHierarchy(
                f"Subtasks can only be children of tasks, not of a {parent_type}."
            )

    def depth_of(self, node_id, nodes):
        """Number of ancestors above ``node_id``; stops on loops."""
        depth = 0
        visited = {node_id}
        current = nodes[node_id].parent_id
        while current is not None and current in nodes:
            if current in visited:
                break
            visited.add(current)
            depth += 1
            current = nodes[current].parent_id
        return depth

    def height_of(self, node_id, nodes):
        """Number of levels of descendants below ``node_id``."""
        children = defaultdict(list)
        for node in nodes.values():
            if node.parent_id is not None:
                children[node.parent_id].append(node.id)

        height = 0
        frontier = [node_id]
        visited = {node_id}
        while True:
            next_frontier = [
                child
                for parent_id in frontier
                for child in children.get(parent_id, ())
                if child not in visited
            ]
            if not next_frontier:
                return height
            visited.update(next_frontier)
            frontier = next_frontier
            height += 1

    def _ensure_acyclic(self, candidate_id, proposed_parent_id, nodes):
        visited = set()
        current = proposed_parent_id
        while current is not None:
            if candidate_id is not None and current == candidate_id:
                logger.warning(
                    f"Refused parent {proposed_parent_id} for work item {candidate_id}: cycle"
                )
                raise CircularHierarchy(
                    "Setting this parent would create a circular reference"
                )
            if current in visited:
                raise CircularHierarchy("Existing work item hierarchy contains a cycle")
            visited.add(current)
            node = nodes.get(current)
            current = node.parent_id if node is not None else None
