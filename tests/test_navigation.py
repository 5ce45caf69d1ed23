from core.desktop.devtools.application.navigation import NavigationController
from core.desktop.devtools.application.row_projector import project_rows

from conftest import make_task


def test_page_down_clamps_to_last_row():
    nav = NavigationController()
    assert nav.page_down(0, 3) == 2


def test_page_moves_by_ten():
    nav = NavigationController()
    assert nav.page_down(5, 40) == 15
    assert nav.page_up(15, 40) == 5
    assert nav.page_up(4, 40) == 0


def test_up_and_down_wrap_when_looping():
    nav = NavigationController(loop=True)
    assert nav.navigate_up(0, 5) == 4
    assert nav.navigate_down(4, 5) == 0
    assert nav.navigate_down(1, 5) == 2
    assert nav.navigate_up(3, 5) == 2


def test_up_and_down_clamp_without_loop():
    nav = NavigationController(loop=False)
    assert nav.navigate_up(0, 5) == 0
    assert nav.navigate_down(4, 5) == 4


def test_empty_sequence_is_a_no_op():
    nav = NavigationController()
    for op in (nav.navigate_up, nav.navigate_down, nav.page_up, nav.page_down):
        assert op(-1, 0) == -1
    assert nav.select_current([], -1) is None


def test_select_current_invokes_callback():
    calls = []
    nav = NavigationController(on_select=lambda row, index: calls.append((row.label, index)))
    rows = project_rows([make_task(1), make_task(2, subtasks=1)], None, True)
    assert nav.select_current(rows, 2).label == "2.1"
    assert calls == [("2.1", 2)]


def test_custom_page_size():
    nav = NavigationController(page_size=3)
    assert nav.page_down(0, 10) == 3
