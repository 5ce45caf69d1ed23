from core.desktop.devtools.application.row_projector import Identity, project_rows
from core.desktop.devtools.application.selection import (
    NO_SELECTION,
    Selection,
    identity_of,
    reconcile,
    select_index,
)

from conftest import make_task


def _five(overrides=None):
    overrides = overrides or {}
    return [make_task(i, status=overrides.get(i, "pending")) for i in range(1, 6)]


def test_empty_new_rows_clear_selection():
    old = project_rows(_five(), None, False)
    assert reconcile(old, [], select_index(old, 2)) == NO_SELECTION


def test_scenario_status_change_keeps_position():
    old = project_rows(_five(), None, False)
    selection = select_index(old, 2)
    new = project_rows(_five({3: "done"}), None, False)
    result = reconcile(old, new, selection)
    assert result.index == 2
    assert result.identity == Identity("3")
    assert new[result.index].status == "done"


def test_scenario_subtask_toggle_keeps_task():
    tasks = [make_task(1), make_task(2, subtasks=3), make_task(3), make_task(4), make_task(5)]
    old = project_rows(tasks, None, False)
    selection = select_index(old, 1)
    new = project_rows(tasks, None, True)
    assert [r.label for r in new] == ["1", "2", "2.1", "2.2", "2.3", "3", "4", "5"]
    result = reconcile(old, new, selection)
    assert result == Selection(1, Identity("2"))


def test_scenario_deleted_task_clamps_to_same_slot():
    old = project_rows(_five(), None, False)
    selection = select_index(old, 2)
    remaining = [t for t in _five() if t.id != 3]
    new = project_rows(remaining, None, False)
    result = reconcile(old, new, selection)
    assert result.index == 2
    assert result.identity == Identity("4")


def test_deleting_last_row_clamps_into_range():
    old = project_rows(_five(), None, False)
    selection = select_index(old, 4)
    new = project_rows(_five()[:3], None, False)
    result = reconcile(old, new, selection)
    assert result == Selection(2, Identity("3"))


def test_selection_follows_item_when_rows_are_inserted_before_it():
    tasks = _five()
    old = project_rows(tasks, None, False)
    selection = select_index(old, 3)  # task 4
    new = project_rows([make_task(0), make_task(-1)] + tasks, None, False)
    result = reconcile(old, new, selection)
    assert result.identity == Identity("4")
    assert new[result.index].task_id == 4


def test_selected_subtask_survives_filter_change():
    parent = make_task(1, subtasks=2)
    parent.subtasks[1].status = "done"
    tasks = [parent, make_task(2)]
    old = project_rows(tasks, None, True)
    selection = select_index(old, 2)  # 1.2
    new = project_rows(tasks, "done", True)
    result = reconcile(old, new, selection)
    assert result.identity == Identity("1", "2")
    assert result.index == 2


def test_missing_identity_falls_back_to_old_row():
    old = project_rows(_five(), None, False)
    new = project_rows(list(reversed(_five())), None, False)
    result = reconcile(old, new, Selection(1, None))
    assert result.identity == Identity("2")
    assert new[result.index].task_id == 2


def test_initial_selection_lands_on_first_row():
    new = project_rows(_five(), None, False)
    assert reconcile([], new, NO_SELECTION) == Selection(0, Identity("1"))


def test_identity_matches_across_id_types():
    old = project_rows([make_task("3")], None, False)
    new = project_rows([make_task(1), make_task(3)], None, False)
    assert reconcile(old, new, select_index(old, 0)).index == 1


def test_select_index_clamps_and_records_identity():
    rows = project_rows(_five(), None, False)
    assert select_index(rows, 99) == Selection(4, Identity("5"))
    assert select_index(rows, -3) == Selection(0, Identity("1"))
    assert select_index([], 0) == NO_SELECTION
    assert identity_of(rows[0]) == Identity("1")
    assert identity_of(None) is None
