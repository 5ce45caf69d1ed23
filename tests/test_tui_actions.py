import pytest

from core.desktop.devtools.interface import tui_actions
from core.desktop.devtools.interface.constants import FILTER_CYCLE
from core.desktop.devtools.interface.tui_navigation import jump_to_edge, move_page, move_vertical_selection

from conftest import raw_task, write_tasks
from tui_fakes import make_engine, make_tui


@pytest.mark.parametrize(
    "current, expected",
    [
        ("pending", "in-progress"),
        ("in-progress", "done"),
        ("done", "pending"),
        ("completed", "pending"),
        ("blocked", "pending"),
        (None, "pending"),
    ],
)
def test_next_status_ring(current, expected):
    assert tui_actions.next_status(current) == expected


def test_cycle_row_status_writes_through_store(tasks_file):
    engine = make_engine(tasks_file, [raw_task(1), raw_task(2, subtasks=[{"id": 1, "title": "s"}])])
    tui = make_tui(engine)
    tui_actions.cycle_row_status(tui, engine.rows[2])
    assert tui.mutations[0][:2] == ("set_status", ("2.1", "in-progress"))
    assert engine.rows[2].status == "in-progress"
    assert "2.1" in tui.status_message


def test_quick_filters_and_cycle(tasks_file):
    engine = make_engine(tasks_file, [raw_task(1, status="done"), raw_task(2)])
    tui = make_tui(engine)
    tui_actions.apply_quick_filter(tui, "4")
    assert engine.status_filter == "done"
    assert [r.label for r in engine.rows] == ["1"]
    tui_actions.apply_quick_filter(tui, "9")
    assert engine.status_filter == "done"
    tui_actions.apply_quick_filter(tui, "1")
    assert engine.status_filter is None
    tui_actions.cycle_filter(tui, 1)
    assert engine.status_filter == FILTER_CYCLE[1]
    tui_actions.cycle_filter(tui, -1)
    tui_actions.cycle_filter(tui, -1)
    assert engine.status_filter == FILTER_CYCLE[-1]
    assert tui.messages[-1].startswith("Filter:")


def test_filter_cycle_reaches_completed(tasks_file):
    engine = make_engine(tasks_file, [raw_task(1, status="completed"), raw_task(2)])
    tui = make_tui(engine)
    tui_actions.set_filter(tui, "done")
    tui_actions.cycle_filter(tui, 1)
    assert engine.status_filter == "completed"
    assert [r.label for r in engine.rows] == ["1"]


def test_toggle_subtasks_message(tasks_file):
    engine = make_engine(tasks_file, [raw_task(1, subtasks=[{"id": 1, "title": "s"}])])
    tui = make_tui(engine)
    tui_actions.toggle_subtasks(tui)
    assert len(engine.rows) == 1
    assert tui.status_message == "subtasks off"
    tui_actions.toggle_subtasks(tui)
    assert len(engine.rows) == 2


def test_refresh_now_messages(tasks_file):
    engine = make_engine(tasks_file, [raw_task(1)])
    tui = make_tui(engine)
    tui_actions.refresh_now(tui)
    assert tui.status_message == "Already up to date"
    write_tasks(tasks_file, [raw_task(1), raw_task(2)])
    tui_actions.refresh_now(tui)
    assert tui.status_message == "Reloaded"
    assert tui.polling == 1
    tasks_file.write_text("{", encoding="utf-8")
    tui_actions.refresh_now(tui)
    assert tui.status_message.startswith("Cannot load tasks")


def test_vertical_moves_wrap_and_clamp(tasks_file):
    engine = make_engine(tasks_file, [raw_task(i) for i in range(1, 6)])
    tui = make_tui(engine)
    move_vertical_selection(tui, -1)
    assert engine.selection.index == 4
    move_vertical_selection(tui, 1)
    assert engine.selection.index == 0
    move_vertical_selection(tui, 3)
    assert engine.selection.index == 3
    move_vertical_selection(tui, 10)
    assert engine.selection.index == 4
    assert tui.renders >= 4


def test_page_and_edge_jumps(tasks_file):
    engine = make_engine(tasks_file, [raw_task(i) for i in range(1, 26)])
    tui = make_tui(engine)
    move_page(tui, 1)
    assert engine.selection.index == 10
    move_page(tui, -1)
    assert engine.selection.index == 0
    jump_to_edge(tui, end=True)
    assert engine.selection.index == 24
    jump_to_edge(tui, end=False)
    assert engine.selection.index == 0


def test_moves_on_empty_list_do_nothing(tasks_file):
    engine = make_engine(tasks_file, [])
    tui = make_tui(engine)
    move_vertical_selection(tui, 1)
    jump_to_edge(tui, end=True)
    assert engine.selection.index == -1
    assert tui.renders == 0
