from enum import Enum
from typing import Final, Literal, Optional


class TaskStatus(Enum):
    PENDING = ("pending", "yellow", "○")
    IN_PROGRESS = ("in-progress", "orange", "►")
    DONE = ("done", "green", "✓")
    COMPLETED = ("completed", "green", "✓")
    BLOCKED = ("blocked", "red", "!")
    REVIEW = ("review", "magenta", "?")
    DEFERRED = ("deferred", "gray", "x")
    CANCELLED = ("cancelled", "gray", "✗")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def symbol(self) -> str:
        return self.value[2]

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional["TaskStatus"]:
        token = normalize_status(value or "", allow_unknown=True)
        for status in cls:
            if status.code == token:
                return status
        return None


class Priority(Enum):
    HIGH = ("high", 3)
    MEDIUM = ("medium", 2)
    LOW = ("low", 1)

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def weight(self) -> int:
        return self.value[1]

    @classmethod
    def from_string(cls, value: Optional[str]) -> "Priority":
        token = (value or "").strip().lower()
        for priority in cls:
            if priority.code == token:
                return priority
        return cls.MEDIUM


StatusCode = Literal["pending", "in-progress", "done", "completed", "blocked", "review", "deferred", "cancelled"]

STATUS_CODES: Final[tuple[str, ...]] = tuple(s.code for s in TaskStatus)
DONE_CODES: Final[frozenset[str]] = frozenset({"done", "completed"})
DEFAULT_STATUS: Final[str] = "pending"

_ALIASES: Final[dict[str, str]] = {
    "in_progress": "in-progress",
    "inprogress": "in-progress",
    "active": "in-progress",
    "todo": "pending",
    "canceled": "cancelled",
}


def normalize_status(value: str, *, allow_unknown: bool = False) -> str:
    """Normalize status input to a canonical status code.

    Canonical codes: pending, in-progress, done, completed, blocked, review,
    deferred, cancelled. With allow_unknown=True an unrecognised token is
    returned lowercased instead of raising.
    """
    token = (value or "").strip().lower().replace(" ", "-")
    if not token:
        return token
    token = _ALIASES.get(token, token)
    if token in STATUS_CODES:
        return token
    if allow_unknown:
        return token
    raise ValueError(f"Invalid task status: {value!r}")


def is_done(status: Optional[str]) -> bool:
    return normalize_status(status or "", allow_unknown=True) in DONE_CODES


def status_symbol(status: Optional[str]) -> str:
    found = TaskStatus.from_string(status)
    return found.symbol if found else "?"
