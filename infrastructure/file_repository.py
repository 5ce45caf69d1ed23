import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from application.ports import TaskStore
from core import (
    DEFAULT_STATUS,
    DONE_CODES,
    LoadError,
    Priority,
    Snapshot,
    Task,
    TaskId,
    TaskStoreError,
    id_key,
    select_next_task,
    normalize_status,
)
from infrastructure.task_file_parser import DEFAULT_TAG, TaskFileParser

logger = logging.getLogger("tasklive.store")

TASKS_FILE_CANDIDATES: Tuple[str, ...] = (
    ".taskmaster/tasks/tasks.json",
    "tasks/tasks.json",
    "tasks.json",
)

_UPDATABLE_FIELDS: Dict[str, str] = {
    "title": "title",
    "description": "description",
    "details": "details",
    "priority": "priority",
    "status": "status",
    "test_strategy": "testStrategy",
    "testStrategy": "testStrategy",
}


def find_project_root(start: Optional[Path] = None) -> Optional[Path]:
    """Walk up from `start` to the first directory that looks like a task project."""
    current = Path(start or Path.cwd()).expanduser().resolve()
    for candidate in (current, *current.parents):
        if (candidate / ".taskmaster").is_dir():
            return candidate
        if any((candidate / rel).is_file() for rel in TASKS_FILE_CANDIDATES[1:]):
            return candidate
    return None


def resolve_tasks_file(project_root: Path) -> Path:
    root = Path(project_root)
    for rel in TASKS_FILE_CANDIDATES:
        path = root / rel
        if path.exists():
            return path
    return root / TASKS_FILE_CANDIDATES[0]


def _split_ref(ref: TaskId) -> Tuple[str, Optional[str]]:
    key = id_key(ref)
    if "." in key:
        parent, _, child = key.partition(".")
        return parent, child
    return key, None


def _store_id(value: TaskId) -> TaskId:
    key = id_key(value)
    return int(key) if key.isdigit() else key


def _next_numeric_id(items: Iterable[Dict[str, Any]]) -> int:
    numbers = []
    for item in items:
        key = id_key(item.get("id"))
        if key.isdigit():
            numbers.append(int(key))
    return (max(numbers) + 1) if numbers else 1


class JsonTaskStore(TaskStore):
    def __init__(self, tasks_file: Path, tag: str = DEFAULT_TAG):
        self.tasks_file = Path(tasks_file)
        self.tag = tag or DEFAULT_TAG
        # Serialises read-modify-write cycles from worker threads.
        self._edit_lock = threading.Lock()

    @property
    def project_root(self) -> Path:
        path = self.tasks_file.parent
        while path.name in ("tasks", ".taskmaster") and path.parent != path:
            path = path.parent
        return path

    # ------------------------------------------------------------------ reads

    def get_snapshot(self) -> Snapshot:
        return TaskFileParser.parse(self.tasks_file, self.tag)

    def compute_signature(self) -> int:
        try:
            stat = self.tasks_file.stat()
        except OSError:
            return 0
        return int(stat.st_mtime_ns) ^ (int(stat.st_size) << 1)

    def find_next_task(self) -> Optional[Task]:
        return select_next_task(self.get_snapshot().tasks)

    # --------------------------------------------------------------- plumbing

    def _load_payload(self) -> Dict[str, Any]:
        payload = TaskFileParser.read_payload(self.tasks_file)
        if payload is None or payload == {}:
            return {self.tag: {"tasks": [], "metadata": {"created": self._now()}}}
        return payload

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    def _section(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        section, tagged = TaskFileParser.select_section(payload, self.tag)
        if tagged and self.tag not in payload:
            section = {"tasks": [], "metadata": {"created": self._now()}}
            payload[self.tag] = section
        if not isinstance(section.get("tasks"), list):
            section["tasks"] = []
        return section

    def _write_payload(self, payload: Dict[str, Any]) -> None:
        target = self.tasks_file
        target.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
        tmp_path: Optional[Path] = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                delete=False,
                dir=str(target.parent),
                prefix=f".{target.name}.",
                suffix=".tmp",
            ) as tmp:
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
                tmp_path = Path(tmp.name)
            os.replace(str(tmp_path), str(target))
        finally:
            if tmp_path and tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    pass

    def _edit(self, label: str, mutate: Callable[[List[Dict[str, Any]]], None]) -> Snapshot:
        """Read, apply `mutate` to the raw task dicts, write atomically, return the new snapshot."""
        with self._edit_lock:
            payload = self._load_payload()
            section = self._section(payload)
            mutate(section["tasks"])
            metadata = section.get("metadata")
            if isinstance(metadata, dict):
                metadata["updated"] = self._now()
            self._write_payload(payload)
        logger.debug("%s written to %s", label, self.tasks_file)
        return TaskFileParser.parse_payload(payload, self.tag)

    @staticmethod
    def _find_raw(tasks: List[Dict[str, Any]], task_id: TaskId) -> Dict[str, Any]:
        key = id_key(task_id)
        for raw in tasks:
            if isinstance(raw, dict) and id_key(raw.get("id")) == key:
                return raw
        raise TaskStoreError(f"Task {key} not found")

    @staticmethod
    def _find_raw_subtask(parent: Dict[str, Any], subtask_id: TaskId) -> Dict[str, Any]:
        key = id_key(subtask_id)
        for raw in parent.get("subtasks") or []:
            if isinstance(raw, dict) and id_key(raw.get("id")) == key:
                return raw
        raise TaskStoreError(f"Subtask {id_key(parent.get('id'))}.{key} not found")

    @classmethod
    def _ref_exists(cls, tasks: List[Dict[str, Any]], ref: TaskId) -> bool:
        parent_key, child_key = _split_ref(ref)
        try:
            parent = cls._find_raw(tasks, parent_key)
            if child_key is not None:
                cls._find_raw_subtask(parent, child_key)
        except TaskStoreError:
            return False
        return True

    # -------------------------------------------------------------- mutations

    def set_status(self, task_id: TaskId, status: str) -> Snapshot:
        try:
            code = normalize_status(status)
        except ValueError as exc:
            raise TaskStoreError(str(exc)) from exc
        refs = [part.strip() for part in id_key(task_id).split(",") if part.strip()]
        if not refs:
            raise TaskStoreError("No task id given")

        def _apply(tasks: List[Dict[str, Any]]) -> None:
            for ref in refs:
                parent_key, child_key = _split_ref(ref)
                parent = self._find_raw(tasks, parent_key)
                if child_key is None:
                    parent["status"] = code
                    if code in DONE_CODES:
                        for st in parent.get("subtasks") or []:
                            if isinstance(st, dict):
                                st["status"] = code
                else:
                    self._find_raw_subtask(parent, child_key)["status"] = code

        return self._edit(f"set-status {task_id}={code}", _apply)

    def add_task(
        self,
        title: str,
        description: str = "",
        priority: str = "medium",
        dependencies: Optional[Iterable[TaskId]] = None,
        details: str = "",
    ) -> Snapshot:
        title = (title or "").strip()
        if not title:
            raise TaskStoreError("Task title is required")
        deps = list(dependencies or [])

        def _apply(tasks: List[Dict[str, Any]]) -> None:
            missing = [id_key(d) for d in deps if not self._ref_exists(tasks, d)]
            if missing:
                raise TaskStoreError(f"Unknown dependencies: {', '.join(missing)}")
            tasks.append(
                {
                    "id": _next_numeric_id(t for t in tasks if isinstance(t, dict)),
                    "title": title,
                    "description": description or "",
                    "status": DEFAULT_STATUS,
                    "priority": Priority.from_string(priority).code,
                    "dependencies": [_store_id(d) for d in deps],
                    "details": details or "",
                    "testStrategy": "",
                    "subtasks": [],
                }
            )

        return self._edit(f"add-task {title!r}", _apply)

    def update_task(self, task_id: TaskId, fields: Dict[str, Any]) -> Snapshot:
        unknown = sorted(set(fields) - set(_UPDATABLE_FIELDS))
        if unknown:
            raise TaskStoreError(f"Cannot update fields: {', '.join(unknown)}")
        changes: Dict[str, Any] = {}
        for key, value in fields.items():
            if key == "status":
                try:
                    value = normalize_status(str(value))
                except ValueError as exc:
                    raise TaskStoreError(str(exc)) from exc
            elif key == "priority":
                value = Priority.from_string(str(value)).code
            changes[_UPDATABLE_FIELDS[key]] = value

        def _apply(tasks: List[Dict[str, Any]]) -> None:
            parent_key, child_key = _split_ref(task_id)
            target = self._find_raw(tasks, parent_key)
            if child_key is not None:
                target = self._find_raw_subtask(target, child_key)
            target.update(changes)

        return self._edit(f"update-task {task_id}", _apply)

    def remove_task(self, task_id: TaskId) -> Snapshot:
        parent_key, child_key = _split_ref(task_id)
        if child_key is not None:
            return self.remove_subtask(parent_key, child_key)

        def _apply(tasks: List[Dict[str, Any]]) -> None:
            target = self._find_raw(tasks, parent_key)
            tasks.remove(target)
            for raw in tasks:
                if not isinstance(raw, dict):
                    continue
                deps = raw.get("dependencies")
                if isinstance(deps, list):
                    raw["dependencies"] = [d for d in deps if id_key(d) != parent_key]

        return self._edit(f"remove-task {task_id}", _apply)

    def add_subtask(self, parent_id: TaskId, title: str, description: str = "", details: str = "") -> Snapshot:
        title = (title or "").strip()
        if not title:
            raise TaskStoreError("Subtask title is required")

        def _apply(tasks: List[Dict[str, Any]]) -> None:
            parent = self._find_raw(tasks, parent_id)
            subtasks = parent.get("subtasks")
            if not isinstance(subtasks, list):
                subtasks = []
                parent["subtasks"] = subtasks
            subtasks.append(
                {
                    "id": _next_numeric_id(st for st in subtasks if isinstance(st, dict)),
                    "title": title,
                    "description": description or "",
                    "status": DEFAULT_STATUS,
                    "dependencies": [],
                    "details": details or "",
                }
            )

        return self._edit(f"add-subtask {parent_id}", _apply)

    def remove_subtask(self, parent_id: TaskId, subtask_id: TaskId, convert: bool = False) -> Snapshot:
        def _apply(tasks: List[Dict[str, Any]]) -> None:
            parent = self._find_raw(tasks, parent_id)
            sub = self._find_raw_subtask(parent, subtask_id)
            parent["subtasks"].remove(sub)
            if not convert:
                return
            deps = [d for d in (sub.get("dependencies") or []) if id_key(d)]
            parent_ref = _store_id(parent.get("id"))
            if id_key(parent_ref) not in {id_key(d) for d in deps}:
                deps.append(parent_ref)
            tasks.append(
                {
                    "id": _next_numeric_id(t for t in tasks if isinstance(t, dict)),
                    "title": sub.get("title") or "",
                    "description": sub.get("description") or "",
                    "status": sub.get("status") or DEFAULT_STATUS,
                    "priority": parent.get("priority") or Priority.MEDIUM.code,
                    "dependencies": deps,
                    "details": sub.get("details") or "",
                    "testStrategy": "",
                    "subtasks": [],
                }
            )

        return self._edit(f"remove-subtask {parent_id}.{subtask_id}", _apply)

    def clear_subtasks(self, task_ids: Optional[List[TaskId]] = None) -> Snapshot:
        def _apply(tasks: List[Dict[str, Any]]) -> None:
            if task_ids is None:
                targets = [t for t in tasks if isinstance(t, dict)]
            else:
                targets = [self._find_raw(tasks, tid) for tid in task_ids]
            for raw in targets:
                raw["subtasks"] = []

        return self._edit("clear-subtasks", _apply)

    def add_dependency(self, task_id: TaskId, depends_on: TaskId) -> Snapshot:
        if id_key(task_id) == id_key(depends_on):
            raise TaskStoreError(f"Task {id_key(task_id)} cannot depend on itself")

        def _apply(tasks: List[Dict[str, Any]]) -> None:
            target = self._find_raw(tasks, task_id)
            if not self._ref_exists(tasks, depends_on):
                raise TaskStoreError(f"Dependency {id_key(depends_on)} not found")
            deps = target.get("dependencies")
            if not isinstance(deps, list):
                deps = []
                target["dependencies"] = deps
            if id_key(depends_on) in {id_key(d) for d in deps}:
                raise TaskStoreError(f"Task {id_key(task_id)} already depends on {id_key(depends_on)}")
            deps.append(_store_id(depends_on))

        return self._edit(f"add-dependency {task_id}->{depends_on}", _apply)

    def remove_dependency(self, task_id: TaskId, depends_on: TaskId) -> Snapshot:
        def _apply(tasks: List[Dict[str, Any]]) -> None:
            target = self._find_raw(tasks, task_id)
            deps = target.get("dependencies") if isinstance(target.get("dependencies"), list) else []
            remaining = [d for d in deps if id_key(d) != id_key(depends_on)]
            if len(remaining) == len(deps):
                raise TaskStoreError(f"Task {id_key(task_id)} does not depend on {id_key(depends_on)}")
            target["dependencies"] = remaining

        return self._edit(f"remove-dependency {task_id}->{depends_on}", _apply)


def create_store(project_root: Optional[Path] = None, tag: str = DEFAULT_TAG) -> JsonTaskStore:
    """Build a store for `project_root` (auto-detected when omitted)."""
    root = Path(project_root).expanduser() if project_root else find_project_root()
    if root is None or not root.exists():
        raise LoadError('No task project found. Create .taskmaster/tasks/tasks.json or pass --project-root.')
    return JsonTaskStore(resolve_tasks_file(root), tag=tag)
