import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from core import DEFAULT_STATUS, Priority, Snapshot, Subtask, Task, TaskId, TaskStoreError, normalize_status


DEFAULT_TAG = "master"


class TaskFileParser:
    """Reads tasks.json payloads (legacy and tagged layouts) into Snapshots.

    Entries are parsed leniently: missing status/priority/subtasks fall back to
    defaults, entries without an id are skipped.
    """

    @staticmethod
    def _coerce_id(value: Any) -> Optional[TaskId]:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raw = str(value).strip()
        if not raw:
            return None
        return int(raw) if raw.isdigit() else raw

    @staticmethod
    def _coerce_text(value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @classmethod
    def _coerce_ids(cls, value: Any) -> List[TaskId]:
        if not isinstance(value, list):
            return []
        result: List[TaskId] = []
        for item in value:
            coerced = cls._coerce_id(item)
            if coerced is not None:
                result.append(coerced)
        return result

    @staticmethod
    def _coerce_status(value: Any) -> str:
        raw = str(value or "").strip()
        if not raw:
            return DEFAULT_STATUS
        return normalize_status(raw, allow_unknown=True)

    @classmethod
    def parse_subtask(cls, raw: Any) -> Optional[Subtask]:
        if not isinstance(raw, dict):
            return None
        sub_id = cls._coerce_id(raw.get("id"))
        if sub_id is None:
            return None
        return Subtask(
            id=sub_id,
            title=cls._coerce_text(raw.get("title")),
            status=cls._coerce_status(raw.get("status")),
            description=cls._coerce_text(raw.get("description")),
            dependencies=cls._coerce_ids(raw.get("dependencies")),
            details=cls._coerce_text(raw.get("details")),
        )

    @classmethod
    def parse_task(cls, raw: Any) -> Optional[Task]:
        if not isinstance(raw, dict):
            return None
        task_id = cls._coerce_id(raw.get("id"))
        if task_id is None:
            return None
        subtasks: List[Subtask] = []
        raw_subtasks = raw.get("subtasks")
        if isinstance(raw_subtasks, list):
            for item in raw_subtasks:
                parsed = cls.parse_subtask(item)
                if parsed is not None:
                    subtasks.append(parsed)
        return Task(
            id=task_id,
            title=cls._coerce_text(raw.get("title")),
            status=cls._coerce_status(raw.get("status")),
            description=cls._coerce_text(raw.get("description")),
            priority=Priority.from_string(raw.get("priority")).code,
            dependencies=cls._coerce_ids(raw.get("dependencies")),
            subtasks=subtasks,
            details=cls._coerce_text(raw.get("details")),
            test_strategy=cls._coerce_text(raw.get("testStrategy") or raw.get("test_strategy")),
        )

    @staticmethod
    def select_section(payload: Any, tag: str = DEFAULT_TAG) -> Tuple[Dict[str, Any], bool]:
        """Return (section holding "tasks", is_tagged_layout)."""
        if not isinstance(payload, dict):
            raise TaskStoreError("tasks file must contain a JSON object")
        if isinstance(payload.get("tasks"), list):
            return payload, False
        section = payload.get(tag)
        if isinstance(section, dict):
            return section, True
        return {"tasks": []}, bool(payload)

    @classmethod
    def parse_payload(cls, payload: Any, tag: str = DEFAULT_TAG) -> Snapshot:
        section, _ = cls.select_section(payload, tag)
        tasks: List[Task] = []
        for item in section.get("tasks") or []:
            parsed = cls.parse_task(item)
            if parsed is not None:
                tasks.append(parsed)
        return Snapshot.from_tasks(tasks)

    @staticmethod
    def read_payload(filepath: Path) -> Optional[Dict[str, Any]]:
        if not filepath.exists():
            return None
        content = filepath.read_text(encoding="utf-8")
        if not content.strip():
            return {}
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            raise TaskStoreError(f"{filepath}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc

    @classmethod
    def parse(cls, filepath: Path, tag: str = DEFAULT_TAG) -> Snapshot:
        payload = cls.read_payload(filepath)
        if payload is None:
            return Snapshot.empty()
        return cls.parse_payload(payload, tag)
