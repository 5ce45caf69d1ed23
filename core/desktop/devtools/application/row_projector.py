"""Flatten the task/subtask tree into the ordered row sequence shown by the list."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence

from core import DONE_CODES, STATUS_CODES, Subtask, Task, TaskId, id_key

ROW_TASK = "task"
ROW_SUBTASK = "subtask"
ALL_FILTER = "all"


class Identity(NamedTuple):
    """Stable (task id, subtask id) pair; ids compared by their string form."""

    task_id: str
    subtask_id: Optional[str] = None

    @classmethod
    def of(cls, task_id: TaskId, subtask_id: Optional[TaskId] = None) -> "Identity":
        return cls(id_key(task_id), id_key(subtask_id) if subtask_id is not None else None)

    @property
    def label(self) -> str:
        return f"{self.task_id}.{self.subtask_id}" if self.subtask_id is not None else self.task_id


@dataclass(frozen=True)
class Row:
    kind: str
    task_id: TaskId
    subtask_id: Optional[TaskId] = None
    depth: int = 0
    task: Optional[Task] = field(default=None, compare=False, repr=False)
    subtask: Optional[Subtask] = field(default=None, compare=False, repr=False)

    @property
    def identity(self) -> Identity:
        return Identity.of(self.task_id, self.subtask_id)

    @property
    def is_subtask(self) -> bool:
        return self.kind == ROW_SUBTASK

    @property
    def item(self):
        return self.subtask if self.is_subtask else self.task

    @property
    def status(self) -> str:
        item = self.item
        return getattr(item, "status", "") if item is not None else ""

    @property
    def title(self) -> str:
        item = self.item
        return getattr(item, "title", "") if item is not None else ""

    @property
    def label(self) -> str:
        return self.identity.label


def normalize_filter(status_filter: Optional[str]) -> Optional[str]:
    """Map "all"/empty to None; everything else is a status code."""
    if status_filter is None:
        return None
    token = str(status_filter).strip().lower()
    if not token or token == ALL_FILTER:
        return None
    return token


def matches_filter(task: Task, status_filter: Optional[str]) -> bool:
    """A task is shown when it or any of its subtasks carries the filtered status."""
    flt = normalize_filter(status_filter)
    if flt is None:
        return True
    if task.status == flt:
        return True
    return any(st.status == flt for st in task.subtasks)


def project_rows(tasks: Iterable[Task], status_filter: Optional[str] = None, show_subtasks: bool = True) -> List[Row]:
    rows: List[Row] = []
    for task in tasks:
        if not matches_filter(task, status_filter):
            continue
        rows.append(Row(kind=ROW_TASK, task_id=task.id, depth=0, task=task))
        if not show_subtasks:
            continue
        # Subtasks of an included parent are never filtered individually.
        for st in task.subtasks:
            rows.append(Row(kind=ROW_SUBTASK, task_id=task.id, subtask_id=st.id, depth=1, task=task, subtask=st))
    return rows


def aggregate_counts(tasks: Sequence[Task], rows: Optional[Sequence[Row]] = None) -> Dict[str, Any]:
    by_status = {code: 0 for code in STATUS_CODES}
    subtasks_total = 0
    subtasks_done = 0
    for task in tasks:
        by_status[task.status] = by_status.get(task.status, 0) + 1
        subtasks_total += len(task.subtasks)
        subtasks_done += task.subtasks_done()
    total = len(tasks)
    done = sum(by_status.get(code, 0) for code in DONE_CODES)
    return {
        "total": total,
        "by_status": by_status,
        "done": done,
        "in_progress": by_status.get("in-progress", 0),
        "pending": by_status.get("pending", 0),
        "blocked": by_status.get("blocked", 0),
        "subtasks_total": subtasks_total,
        "subtasks_done": subtasks_done,
        "completion": round(done * 100 / total) if total else 0,
        "rows": len(rows) if rows is not None else 0,
    }


__all__ = [
    "ROW_TASK",
    "ROW_SUBTASK",
    "ALL_FILTER",
    "Identity",
    "Row",
    "normalize_filter",
    "matches_filter",
    "project_rows",
    "aggregate_counts",
]
