from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from .status import DEFAULT_STATUS, is_done

TaskId = Union[int, str]


@dataclass
class Subtask:
    id: TaskId
    title: str
    status: str = DEFAULT_STATUS
    description: str = ""
    dependencies: List[TaskId] = field(default_factory=list)
    details: str = ""

    @property
    def completed(self) -> bool:
        return is_done(self.status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "dependencies": list(self.dependencies),
            "details": self.details,
        }
