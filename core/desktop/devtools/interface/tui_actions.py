"""Action handlers extracted from TaskDashboardTUI to reduce coupling."""

from typing import Optional

from core import is_done
from core.desktop.devtools.application.row_projector import Row
from core.desktop.devtools.interface.constants import FILTER_CYCLE, QUICK_FILTERS, STATUS_CYCLE


def next_status(current: Optional[str]) -> str:
    """pending → in-progress → done → pending; anything else restarts the ring."""
    token = "done" if is_done(current) else (current or "")
    if token not in STATUS_CYCLE:
        return STATUS_CYCLE[0]
    return STATUS_CYCLE[(STATUS_CYCLE.index(token) + 1) % len(STATUS_CYCLE)]


def cycle_row_status(tui, row: Row) -> None:
    status = next_status(row.status)
    tui.run_mutation(
        "set_status",
        row.label,
        status,
        success=tui._t("STATUS_MESSAGE_STATUS_SET", id=row.label, status=status),
    )


def apply_quick_filter(tui, key: str) -> None:
    value = QUICK_FILTERS.get(key)
    if value is None:
        return
    set_filter(tui, value)


def cycle_filter(tui, step: int = 1) -> None:
    current = tui.engine.status_filter or "all"
    idx = FILTER_CYCLE.index(current) if current in FILTER_CYCLE else 0
    set_filter(tui, FILTER_CYCLE[(idx + step) % len(FILTER_CYCLE)])


def set_filter(tui, value: str) -> None:
    tui.engine.set_filter(value)
    tui.set_status_message(tui._t("STATUS_MESSAGE_FILTER", value=tui.filter_display()), ttl=2)
    tui.force_render()


def toggle_subtasks(tui) -> None:
    shown = tui.engine.toggle_subtasks()
    tui.set_status_message(tui._t("SUBTASKS_SHOWN" if shown else "SUBTASKS_HIDDEN"), ttl=2)
    tui.force_render()


def refresh_now(tui) -> None:
    engine = tui.engine
    before = engine.snapshot
    result = engine.refresh()
    if not result.ok:
        tui.set_status_message(tui._t("ERR_LOAD", error=result.message), ttl=6)
    elif before is not None and engine.snapshot is before:
        tui.set_status_message(tui._t("STATUS_MESSAGE_UNCHANGED"), ttl=2)
    else:
        tui.set_status_message(tui._t("STATUS_MESSAGE_REFRESHED"), ttl=2)
        tui.ensure_polling()
    tui.force_render()


__all__ = [
    "next_status",
    "cycle_row_status",
    "apply_quick_filter",
    "cycle_filter",
    "set_filter",
    "toggle_subtasks",
    "refresh_now",
]
