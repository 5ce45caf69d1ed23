"""Mouse event handling helpers for TaskDashboardTUI."""

from typing import Optional

from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.mouse_events import MouseButton, MouseEventType

# Line 0 of the list body is the "more above" indicator.
FIRST_ROW_Y = 1


def row_index_from_y(tui, y: int) -> Optional[int]:
    engine = tui.engine
    offset = y - FIRST_ROW_Y
    if offset < 0 or offset >= engine.window.length:
        return None
    return engine.window.start + offset


def _handle_scroll(tui, mouse_event) -> bool:
    if mouse_event.event_type == MouseEventType.SCROLL_DOWN:
        tui.move_vertical_selection(1)
        return True
    if mouse_event.event_type == MouseEventType.SCROLL_UP:
        tui.move_vertical_selection(-1)
        return True
    return False


def _handle_list_click(tui, mouse_event) -> bool:
    if getattr(tui.engine, "load_error", None):
        return False
    idx = row_index_from_y(tui, mouse_event.position.y)
    if idx is None:
        return False
    if tui.engine.selection.index == idx:
        tui.engine.select_current()
    else:
        tui.engine.select_index(idx)
    tui.force_render()
    return True


def handle_body_mouse(tui, mouse_event):
    """Route mouse events for the task list body."""
    if _handle_scroll(tui, mouse_event):
        return None
    if mouse_event.event_type == MouseEventType.MOUSE_UP and mouse_event.button == MouseButton.LEFT:
        if _handle_list_click(tui, mouse_event):
            return None
    return NotImplemented


class TaskListControl(FormattedTextControl):
    """List body control; clicks and wheel events go to `handle_body_mouse` first."""

    def __init__(self, tui, **kwargs):
        super().__init__(tui.get_task_list_text, show_cursor=False, focusable=False, **kwargs)
        self.tui = tui

    def mouse_handler(self, mouse_event):
        handled = handle_body_mouse(self.tui, mouse_event)
        if handled is NotImplemented:
            return super().mouse_handler(mouse_event)
        return handled


__all__ = ["row_index_from_y", "handle_body_mouse", "TaskListControl"]
