"""Rendering helpers for TaskDashboardTUI to keep the class slim."""

from typing import List, Tuple

from prompt_toolkit.formatted_text import FormattedText

from core import id_key, status_symbol
from core.desktop.devtools.application.row_projector import Row
from core.desktop.devtools.interface.tui_display import ellipsize, pad_display
from core.desktop.devtools.interface.tui_themes import status_style
from util.responsive import ColumnLayout, ResponsiveLayoutManager

Fragments = List[Tuple[str, str]]

MARKER_SELECTED = "› "
MARKER_PLAIN = "  "
# One indicator line above the rows and one below.
INDICATOR_LINES = 2


def _merge_style(selected_style: str, fragment_style: str) -> str:
    if not selected_style:
        return fragment_style
    return f"{selected_style} {fragment_style}".strip()


def _deps_text(row: Row) -> str:
    item = row.item
    deps = getattr(item, "dependencies", None) or []
    return ",".join(id_key(d) for d in deps)


def _subtasks_text(row: Row) -> str:
    if row.is_subtask or row.task is None or not row.task.subtasks:
        return ""
    return f"{row.task.subtasks_done()}/{len(row.task.subtasks)}"


def _title_text(row: Row) -> str:
    if row.is_subtask:
        return "  └ " + row.title
    return row.title


def row_fragments(row: Row, layout: ColumnLayout, width: int, *, selected: bool = False, mono: bool = False) -> Fragments:
    """One list line: marker, then the layout's columns padded to their widths."""
    widths = layout.calculate_widths(max(1, width - len(MARKER_SELECTED)))
    base = status_style(row.status, selected=True, mono=mono) if selected else ""
    stat_style = base or status_style(row.status)
    parts: Fragments = [(_merge_style(base, "class:header" if selected else "class:text"), MARKER_SELECTED if selected else MARKER_PLAIN)]
    for col in layout.columns:
        w = widths[col]
        if col == "id":
            text, style = row.label, "class:text.dim"
        elif col == "stat":
            text, style = status_symbol(row.status), stat_style
        elif col == "title":
            text, style = _title_text(row), "class:text.dim" if row.is_subtask else "class:text"
        elif col == "priority":
            prio = "" if row.is_subtask or row.task is None else row.task.priority
            text, style = prio, f"class:priority.{prio}" if prio else "class:text.dim"
        elif col == "deps":
            text, style = _deps_text(row), "class:text.dimmer"
        else:
            text, style = _subtasks_text(row), "class:text.dim"
        parts.append((_merge_style(base, style), pad_display(ellipsize(text, w), w)))
        parts.append((_merge_style(base, "class:text"), " "))
    return parts


def _indicator(tui, key: str, count: int) -> Fragments:
    if count <= 0:
        return [("class:indicator", "")]
    return [("class:indicator", f"  {tui._t(key, count=count)}")]


def render_load_error(tui, width: int) -> FormattedText:
    error = str(tui.engine.load_error or "")
    parts: Fragments = [
        ("class:border", "╭─ "),
        ("class:error", tui._t("LOAD_ERROR_TITLE")),
        ("", "\n"),
    ]
    for line in error.splitlines() or [""]:
        parts.append(("class:border", "│ "))
        parts.append(("class:text", ellipsize(line, max(1, width - 4))))
        parts.append(("", "\n"))
    parts.append(("class:border", "╰─ "))
    parts.append(("class:text.dim", tui._t("LOAD_ERROR_HINT")))
    return FormattedText(parts)


def render_empty(tui) -> FormattedText:
    engine = tui.engine
    if engine.status_filter:
        label = tui.filter_display()
        return FormattedText([("class:text.dim", "  " + tui._t("TASK_LIST_EMPTY_FILTER", filter=label))])
    return FormattedText([("class:text.dim", "  " + tui._t("TASK_LIST_EMPTY"))])


def render_task_list_text(tui) -> FormattedText:
    engine = tui.engine
    width = max(20, tui.get_terminal_width())
    if engine.load_error:
        return render_load_error(tui, width)
    if not engine.rows:
        return render_empty(tui)
    layout = ResponsiveLayoutManager.select_layout(width)
    window = engine.window
    parts: Fragments = []
    parts.extend(_indicator(tui, "MORE_ABOVE", window.hidden_above()))
    parts.append(("", "\n"))
    for offset, row in enumerate(engine.visible_rows()):
        selected = window.start + offset == engine.selection.index
        parts.extend(row_fragments(row, layout, width, selected=selected, mono=tui.mono_select))
        parts.append(("", "\n"))
    parts.extend(_indicator(tui, "MORE_BELOW", window.hidden_below(len(engine.rows))))
    return FormattedText(parts)


__all__ = [
    "INDICATOR_LINES",
    "row_fragments",
    "render_load_error",
    "render_empty",
    "render_task_list_text",
]
