from typing import Any, Dict, Iterable, List, Optional, Protocol

from core import Snapshot, Task, TaskId


class TaskStore(Protocol):
    """Backing store consumed by the live list engine.

    Every mutation either returns the snapshot it wrote or raises
    TaskStoreError without writing anything.
    """

    def get_snapshot(self) -> Snapshot:
        ...

    def compute_signature(self) -> int:
        ...

    def find_next_task(self) -> Optional[Task]:
        ...

    def set_status(self, task_id: TaskId, status: str) -> Snapshot:
        ...

    def add_task(
        self,
        title: str,
        description: str = "",
        priority: str = "medium",
        dependencies: Optional[Iterable[TaskId]] = None,
        details: str = "",
    ) -> Snapshot:
        ...

    def update_task(self, task_id: TaskId, fields: Dict[str, Any]) -> Snapshot:
        ...

    def remove_task(self, task_id: TaskId) -> Snapshot:
        ...

    def add_subtask(self, parent_id: TaskId, title: str, description: str = "", details: str = "") -> Snapshot:
        ...

    def remove_subtask(self, parent_id: TaskId, subtask_id: TaskId, convert: bool = False) -> Snapshot:
        ...

    def clear_subtasks(self, task_ids: Optional[List[TaskId]] = None) -> Snapshot:
        ...

    def add_dependency(self, task_id: TaskId, depends_on: TaskId) -> Snapshot:
        ...

    def remove_dependency(self, task_id: TaskId, depends_on: TaskId) -> Snapshot:
        ...
