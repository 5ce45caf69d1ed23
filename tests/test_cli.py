import json

import pytest

from core.desktop.devtools.interface import tasks_app
from core.desktop.devtools.interface.cli_commands import format_row_line
from core.desktop.devtools.application.row_projector import project_rows

from conftest import make_task, raw_task, write_tasks


def _run(project, capsys, *argv):
    code = tasks_app.main(["--project-root", str(project), *argv])
    out = capsys.readouterr()
    return code, out.out, out.err


def _json(project, capsys, *argv):
    code, out, _ = _run(project, capsys, *argv, "--json")
    return code, json.loads(out)


def test_list_plain(project, tasks_file, capsys):
    write_tasks(tasks_file, [raw_task(1, status="done"), raw_task(2, subtasks=[{"id": 1, "title": "child"}])])
    code, out, _ = _run(project, capsys, "list")
    assert code == 0
    assert "Task 1" in out and "child" in out
    assert "2 tasks" in out
    code, out, _ = _run(project, capsys, "list", "--no-subtasks", "--status", "pending")
    assert "child" not in out and "Task 1" not in out


def test_list_json(project, tasks_file, capsys):
    write_tasks(tasks_file, [raw_task(1), raw_task(2, status="done")])
    code, body = _json(project, capsys, "list", "--status", "done")
    assert code == 0
    assert body["status"] == "OK"
    assert [t["id"] for t in body["payload"]["tasks"]] == [2]
    assert body["payload"]["counts"]["total"] == 2


def test_list_empty(project, capsys):
    code, out, _ = _run(project, capsys, "list")
    assert code == 0
    assert out.strip() == "No tasks."


def test_next(project, tasks_file, capsys):
    write_tasks(tasks_file, [raw_task(1, status="done"), raw_task(2, dependencies=[1], priority="high")])
    code, out, _ = _run(project, capsys, "next")
    assert code == 0
    assert "#2" in out and "[high]" in out
    code, body = _json(project, capsys, "next")
    assert body["payload"]["task"]["id"] == 2


def test_next_without_candidates(project, capsys):
    code, out, _ = _run(project, capsys, "next")
    assert code == 0
    assert "No eligible task" in out


def test_mutation_commands(project, tasks_file, capsys):
    assert _run(project, capsys, "add", "First", "-d", "desc")[0] == 0
    assert _run(project, capsys, "add", "Second", "--priority", "high", "--depends", "1")[0] == 0
    assert _run(project, capsys, "add-subtask", "1", "Sub")[0] == 0
    assert _run(project, capsys, "set-status", "1.1", "done")[0] == 0
    assert _run(project, capsys, "remove-dep", "2", "1")[0] == 0
    assert _run(project, capsys, "add-dep", "1", "2")[0] == 0
    code, out, _ = _run(project, capsys, "remove-subtask", "1.1", "--convert")
    assert code == 0 and "converted" in out
    assert _run(project, capsys, "clear-subtasks")[0] == 0
    code, body = _json(project, capsys, "remove", "3")
    assert code == 0 and body["payload"]["total_tasks"] == 2
    data = json.loads(tasks_file.read_text(encoding="utf-8"))["master"]["tasks"]
    assert [t["title"] for t in data] == ["First", "Second"]
    assert data[0]["dependencies"] == [2]
    assert data[1]["priority"] == "high"


def test_mutation_errors(project, tasks_file, capsys):
    write_tasks(tasks_file, [raw_task(1)])
    code, _, err = _run(project, capsys, "set-status", "9", "done")
    assert code == 1 and "not found" in err
    code, body = _json(project, capsys, "set-status", "1", "nope")
    assert code == 1 and body["status"] == "ERROR"
    code, _, err = _run(project, capsys, "remove-subtask", "1")
    assert code == 1 and "PARENT.SUBTASK" in err


def test_tag_option(project, tasks_file, capsys):
    write_tasks(tasks_file, [raw_task(1)], feature={"tasks": [raw_task(5, title="Feature work")]})
    code, out, _ = _run(project, capsys, "--tag", "feature", "list")
    assert "Feature work" in out and "Task 1" not in out


def test_missing_project(tmp_path, capsys):
    code, _, err = _run(tmp_path / "missing", capsys, "list")
    assert code == 1
    assert "No task project found" in err


def test_version(capsys):
    assert tasks_app.main(["--version"]) == 0
    assert capsys.readouterr().out.strip()


def test_default_command_is_tui(project, monkeypatch):
    seen = []
    monkeypatch.setattr(tasks_app, "cmd_tui", lambda args: seen.append(args.command) or 0)
    assert tasks_app.main(["--project-root", str(project)]) == 0
    assert seen == ["tui"]


def test_unknown_status_filter_rejected(project):
    with pytest.raises(SystemExit):
        tasks_app.main(["--project-root", str(project), "list", "--status", "bogus"])


def test_format_row_line():
    task = make_task(3, subtasks=1, dependencies=[1, 2], priority="high")
    rows = project_rows([task], None, True)
    assert format_row_line(rows[0]) == "○ 3      Task 3  [high]  ← 1,2"
    assert format_row_line(rows[1]).startswith("    ○ 3.1")
