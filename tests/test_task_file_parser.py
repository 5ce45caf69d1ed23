import pytest

from core import TaskStoreError
from infrastructure.task_file_parser import TaskFileParser


def test_parse_task_is_lenient():
    task = TaskFileParser.parse_task(
        {"id": "3", "title": None, "status": "DONE", "priority": "urgent", "dependencies": ["1", None, 2.0]}
    )
    assert task.id == 3
    assert task.title == ""
    assert task.status == "done"
    assert task.priority == "medium"
    assert task.dependencies == [1, 2]


def test_entries_without_id_are_skipped():
    snapshot = TaskFileParser.parse_payload({"tasks": [{"title": "no id"}, {"id": 1, "title": "ok"}, "junk"]})
    assert [t.id for t in snapshot.tasks] == [1]


def test_unknown_status_is_kept():
    task = TaskFileParser.parse_task({"id": 1, "status": "waiting-on-review"})
    assert task.status == "waiting-on-review"


def test_subtasks_parse_and_skip_invalid():
    task = TaskFileParser.parse_task(
        {"id": 1, "subtasks": [{"id": 1, "title": "a", "status": "in_progress"}, {"title": "x"}, 5]}
    )
    assert len(task.subtasks) == 1
    assert task.subtasks[0].status == "in-progress"


def test_select_section_layouts():
    legacy = {"tasks": []}
    assert TaskFileParser.select_section(legacy) == (legacy, False)
    tagged = {"master": {"tasks": [{"id": 1}]}, "other": {"tasks": []}}
    section, is_tagged = TaskFileParser.select_section(tagged, "other")
    assert is_tagged and section is tagged["other"]
    section, is_tagged = TaskFileParser.select_section(tagged, "missing")
    assert section == {"tasks": []} and is_tagged
    with pytest.raises(TaskStoreError):
        TaskFileParser.select_section([1, 2])


def test_read_payload_edge_cases(tmp_path):
    path = tmp_path / "tasks.json"
    assert TaskFileParser.read_payload(path) is None
    path.write_text("  \n", encoding="utf-8")
    assert TaskFileParser.read_payload(path) == {}
    assert len(TaskFileParser.parse(path)) == 0
    path.write_text("[", encoding="utf-8")
    with pytest.raises(TaskStoreError):
        TaskFileParser.parse(path)
