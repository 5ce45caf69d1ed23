from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Tuple

from .status import Priority, TaskStatus, is_done
from .task import Task, id_key


def build_metadata(tasks: Iterable[Task]) -> Dict[str, Any]:
    """Per-status counts over top-level tasks plus a refresh stamp."""
    items = list(tasks)
    counts = {status.code: 0 for status in TaskStatus}
    for task in items:
        if task.status in counts:
            counts[task.status] += 1
    return {
        "total_tasks": len(items),
        "pending_tasks": counts["pending"],
        "in_progress_tasks": counts["in-progress"],
        "completed_tasks": sum(1 for t in items if is_done(t.status)),
        "status_counts": counts,
        "last_updated": datetime.now(timezone.utc).isoformat(),
    }


@dataclass(frozen=True)
class Snapshot:
    """Unit exchanged with the data source.

    Equality is structural over ``tasks`` only; ``metadata`` carries a refresh
    timestamp and derived counts that must not make two reads of the same
    file look different.
    """

    tasks: Tuple[Task, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_tasks(cls, tasks: Iterable[Task]) -> "Snapshot":
        items = tuple(tasks)
        return cls(tasks=items, metadata=build_metadata(items))

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls.from_tasks(())

    def __len__(self) -> int:
        return len(self.tasks)

    def next_task(self) -> Optional[Task]:
        return select_next_task(self.tasks)


def select_next_task(tasks: Iterable[Task]) -> Optional[Task]:
    """Next eligible task: pending or in-progress with every dependency done.

    Ties are broken by priority (high first), then fewer dependencies, then
    the lowest numeric id.
    """
    items = list(tasks)
    done_ids = {id_key(t.id) for t in items if is_done(t.status)}
    for task in items:
        for st in task.subtasks:
            if st.completed:
                done_ids.add(f"{id_key(task.id)}.{id_key(st.id)}")
    eligible = [
        t
        for t in items
        if t.status in ("pending", "in-progress") and all(id_key(dep) in done_ids for dep in t.dependencies)
    ]
    if not eligible:
        return None

    def _rank(task: Task):
        key = id_key(task.id)
        numeric = int(key) if key.isdigit() else float("inf")
        return (-Priority.from_string(task.priority).weight, len(task.dependencies), numeric, key)

    return min(eligible, key=_rank)
