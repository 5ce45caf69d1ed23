from .status import (
    TaskStatus,
    Priority,
    STATUS_CODES,
    DONE_CODES,
    DEFAULT_STATUS,
    normalize_status,
    is_done,
    status_symbol,
)
from .subtask import Subtask, TaskId
from .task import Task, id_key
from .snapshot import Snapshot, build_metadata, select_next_task
from .errors import TaskLiveError, LoadError, TaskStoreError

__all__ = [
    "TaskStatus",
    "Priority",
    "STATUS_CODES",
    "DONE_CODES",
    "DEFAULT_STATUS",
    "normalize_status",
    "is_done",
    "status_symbol",
    "Subtask",
    "TaskId",
    "Task",
    "id_key",
    "Snapshot",
    "build_metadata",
    "select_next_task",
    # Errors
    "TaskLiveError",
    "LoadError",
    "TaskStoreError",
]
