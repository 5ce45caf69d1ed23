import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from core import Snapshot, Subtask, Task


def make_task(task_id, status="pending", subtasks=0, sub_status="pending", **kwargs) -> Task:
    subs = [Subtask(id=i, title=f"Sub {task_id}.{i}", status=sub_status) for i in range(1, subtasks + 1)]
    return Task(id=task_id, title=kwargs.pop("title", f"Task {task_id}"), status=status, subtasks=subs, **kwargs)


def make_snapshot(*tasks: Task) -> Snapshot:
    return Snapshot.from_tasks(tasks)


def raw_task(task_id, status="pending", subtasks: Optional[List[Dict[str, Any]]] = None, **extra) -> Dict[str, Any]:
    data = {
        "id": task_id,
        "title": extra.pop("title", f"Task {task_id}"),
        "description": extra.pop("description", ""),
        "status": status,
        "priority": extra.pop("priority", "medium"),
        "dependencies": extra.pop("dependencies", []),
        "subtasks": subtasks or [],
    }
    data.update(extra)
    return data


def write_tasks(path: Path, tasks: List[Dict[str, Any]], tagged: bool = True, tag: str = "master", **other_tags) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if tagged:
        payload: Dict[str, Any] = {tag: {"tasks": tasks, "metadata": {"created": "2024-01-01T00:00:00Z"}}}
        payload.update(other_tags)
    else:
        payload = {"tasks": tasks, "metadata": {}}
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Project root with an empty .taskmaster/tasks/tasks.json (tagged layout)."""
    write_tasks(tmp_path / ".taskmaster" / "tasks" / "tasks.json", [])
    return tmp_path


@pytest.fixture
def tasks_file(project: Path) -> Path:
    return project / ".taskmaster" / "tasks" / "tasks.json"


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    import config

    monkeypatch.setattr(config, "USER_CONFIG_PATH", tmp_path / "user_config.yaml")
    for key in list(os.environ):
        if key.startswith("TASKLIVE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def app_session():
    """Headless prompt_toolkit session for constructing the dashboard."""
    from prompt_toolkit.application import create_app_session
    from prompt_toolkit.input import create_pipe_input
    from prompt_toolkit.output import DummyOutput

    with create_pipe_input() as pipe_input:
        with create_app_session(input=pipe_input, output=DummyOutput()):
            yield


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
