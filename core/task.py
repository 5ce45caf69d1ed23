from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .status import DEFAULT_STATUS, Priority, is_done
from .subtask import Subtask, TaskId


def id_key(value: Optional[TaskId]) -> str:
    """Comparable form of a task/subtask id (2 and "2" are the same item)."""
    if value is None:
        return ""
    return str(value).strip()


@dataclass
class Task:
    id: TaskId
    title: str
    status: str = DEFAULT_STATUS
    description: str = ""
    priority: str = Priority.MEDIUM.code
    dependencies: List[TaskId] = field(default_factory=list)
    subtasks: List[Subtask] = field(default_factory=list)
    details: str = ""
    test_strategy: str = ""

    @property
    def completed(self) -> bool:
        return is_done(self.status)

    def subtasks_done(self) -> int:
        return sum(1 for st in self.subtasks if st.completed)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "dependencies": list(self.dependencies),
            "details": self.details,
            "testStrategy": self.test_strategy,
            "subtasks": [st.to_dict() for st in self.subtasks],
        }
        return data
