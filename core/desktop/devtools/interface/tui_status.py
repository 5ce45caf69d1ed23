"""Status bar builder for TaskDashboardTUI."""

import time
from typing import List, Tuple

from prompt_toolkit.formatted_text import FormattedText

from core import id_key
from core.desktop.devtools.interface.tui_display import display_width, ellipsize


def _next_task_fragment(tui) -> Tuple[str, str]:
    task = tui.engine.next_task
    if task is None:
        return ("class:text.dim", tui._t("NEXT_TASK_NONE"))
    return ("class:icon.check", tui._t("NEXT_TASK", id=id_key(task.id), title=ellipsize(task.title, 40)))


def build_status_text(tui) -> FormattedText:
    engine = tui.engine
    counts = engine.counts
    flt_display = tui.filter_display()
    now = time.time()
    if getattr(tui, "_last_filter_value", None) != flt_display:
        tui._filter_flash_until = now + 1.0
        tui._last_filter_value = flt_display
    filter_flash_active = now < getattr(tui, "_filter_flash_until", 0)

    parts: List[Tuple[str, str]] = []
    project_name = tui.project_name()
    if project_name:
        if len(project_name) > 32:
            project_name = project_name[:31] + "…"
        parts.extend(
            [
                ("class:text.dim", f"{tui._t('PROJECT')}: "),
                ("class:header", project_name),
                ("class:text.dim", " | "),
            ]
        )
    parts.extend(
        [
            ("class:text.dim", f"{tui._t('STATUS_TASKS_COUNT', count=counts['total'])} | "),
            ("class:icon.check", str(counts["done"])),
            ("class:text.dim", "/"),
            ("class:icon.warn", str(counts["in_progress"])),
            ("class:text.dim", "/"),
            ("class:icon.fail", str(counts["pending"])),
            ("class:text.dim", " | "),
            ("class:text.dim", tui._t("STATUS_SUBTASKS_COUNT", done=counts["subtasks_done"], total=counts["subtasks_total"])),
            ("class:text.dim", " | "),
        ]
    )
    filter_style = "class:icon.warn" if filter_flash_active else "class:header"
    subtasks_key = "SUBTASKS_SHOWN" if engine.show_subtasks else "SUBTASKS_HIDDEN"
    parts.extend(
        [
            (filter_style, flt_display),
            ("class:text.dim", " | "),
            ("class:text.dim", tui._t(subtasks_key)),
            ("class:text.dim", " | "),
            _next_task_fragment(tui),
        ]
    )
    if getattr(tui, "status_message", "") and time.time() < getattr(tui, "status_message_expires", 0):
        parts.extend(
            [
                ("class:text.dim", " | "),
                ("class:header", tui.status_message[:80]),
            ]
        )
    elif getattr(tui, "status_message", ""):
        tui.status_message = ""

    try:
        term_width = tui.get_terminal_width()
    except Exception:
        term_width = 120
    used = sum(display_width(text) for _, text in parts)
    if used < term_width:
        parts.append(("class:text", " " * (term_width - used)))
    return FormattedText(parts)


__all__ = ["build_status_text"]
