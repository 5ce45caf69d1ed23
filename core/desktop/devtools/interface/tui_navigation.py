"""Navigation helpers for TaskDashboardTUI to keep the class slim."""


def move_vertical_selection(tui, delta: int) -> None:
    """
    Move the selected row by `delta`.

    Single steps go through the engine's looping up/down transitions; larger
    jumps (mouse wheel bursts, Home/End) clamp to the row range.
    """
    engine = tui.engine
    if not engine.rows:
        return
    if delta == 1:
        engine.navigate_down()
    elif delta == -1:
        engine.navigate_up()
    elif delta:
        engine.select_index(max(0, min(engine.selection.index + delta, len(engine.rows) - 1)))
    tui.force_render()


def move_page(tui, direction: int) -> None:
    engine = tui.engine
    if direction > 0:
        engine.page_down()
    else:
        engine.page_up()
    tui.force_render()


def jump_to_edge(tui, end: bool) -> None:
    engine = tui.engine
    if not engine.rows:
        return
    engine.select_index(len(engine.rows) - 1 if end else 0)
    tui.force_render()


__all__ = ["move_vertical_selection", "move_page", "jump_to_edge"]
