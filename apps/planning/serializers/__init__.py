from .board_serializer import (
    BoardColumnSerializer,
    BoardColumnViewSerializer,
    BoardSerializer,
    BoardViewSerializer,
    CreateBoardRequestSerializer,
    MoveWorkItemRequestSerializer,
    ReorderColumnItemsRequestSerializer,
    ReorderColumnsRequestSerializer,
    UpdateBoardColumnRequestSerializer,
    UpdateBoardRequestSerializer,
    WorkItemCardSerializer,
)
from .epic_serializer import (
    CreateEpicRequestSerializer,
    EpicSerializer,
    UpdateEpicRequestSerializer,
)
from .project_serializer import (
    CreateProjectRequestSerializer,
    ProjectSerializer,
    UpdateProjectRequestSerializer,
)
from .status_serializer import (
    CreateStatusRequestSerializer,
    CreateStatusTransitionRequestSerializer,
    StatusSerializer,
    StatusTransitionSerializer,
    UpdateStatusRequestSerializer,
)
from .work_item_serializer import (
    CreateWorkItemRequestSerializer,
    UpdateWorkItemRequestSerializer,
    WorkItemListSerializer,
    WorkItemSerializer,
)

__all__ = [
    "BoardColumnSerializer",
    "BoardColumnViewSerializer",
    "BoardSerializer",
    "BoardViewSerializer",
    "CreateBoardRequestSerializer",
    "CreateEpicRequestSerializer",
    "CreateProjectRequestSerializer",
    "CreateStatusRequestSerializer",
    "CreateStatusTransitionRequestSerializer",
    "CreateWorkItemRequestSerializer",
    "EpicSerializer",
    "MoveWorkItemRequestSerializer",
    "ProjectSerializer",
    "ReorderColumnItemsRequestSerializer",
    "ReorderColumnsRequestSerializer",
    "StatusSerializer",
    "StatusTransitionSerializer",
    "UpdateBoardColumnRequestSerializer",
    "UpdateBoardRequestSerializer",
    "UpdateEpicRequestSerializer",
    "UpdateProjectRequestSerializer",
    "UpdateStatusRequestSerializer",
    "UpdateWorkItemRequestSerializer",
    "WorkItemCardSerializer",
    "WorkItemListSerializer",
    "WorkItemSerializer",
]
