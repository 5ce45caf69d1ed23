"""Footer renderer for TaskDashboardTUI: selected-item detail strip plus key hints."""

from typing import List, Tuple

from prompt_toolkit.formatted_text import FormattedText

from core import id_key
from core.desktop.devtools.interface.tui_display import ellipsize, pad_display, wrap_display

DESCRIPTION_LINES = 2
# border + summary + description + hints + border
FOOTER_HEIGHT = DESCRIPTION_LINES + 4


def _summary_line(tui, row) -> str:
    item = row.item
    segments = [f"#{row.label}", f"{tui._t('DETAIL_STATUS')}: {row.status or '-'}"]
    if row.is_subtask:
        parent = row.task
        if parent is not None:
            segments.append(f"{tui._t('DETAIL_PARENT')}: #{id_key(parent.id)} {parent.title}")
    elif row.task is not None:
        segments.append(f"{tui._t('DETAIL_PRIORITY')}: {row.task.priority}")
        if row.task.subtasks:
            segments.append(f"{tui._t('DETAIL_SUBTASKS')}: {row.task.subtasks_done()}/{len(row.task.subtasks)}")
    deps = getattr(item, "dependencies", None) or []
    if deps:
        segments.append(f"{tui._t('DETAIL_DEPS')}: {', '.join(id_key(d) for d in deps)}")
    return " · ".join(segments)


def _description(row) -> str:
    item = row.item
    text = (getattr(item, "description", "") or getattr(item, "details", "") or "").strip()
    return text


def build_footer_text(tui) -> FormattedText:
    table_width = max(30, tui.get_terminal_width())
    inner_width = max(20, table_width - 4)
    rows: List[Tuple[str, str]] = []
    row = tui.engine.selected_row
    if row is None or tui.engine.load_error:
        rows.append(("class:text.dim", ""))
        for _ in range(DESCRIPTION_LINES):
            rows.append(("class:text.dim", ""))
    else:
        rows.append(("class:header", ellipsize(_summary_line(tui, row), inner_width)))
        label = f"{tui._t('DESCRIPTION')}: "
        desc = _description(row) or tui._t("DESCRIPTION_MISSING")
        wrapped = wrap_display(desc, max(1, inner_width - len(label)), max_lines=DESCRIPTION_LINES)
        for idx in range(DESCRIPTION_LINES):
            prefix = label if idx == 0 else " " * len(label)
            chunk = wrapped[idx] if idx < len(wrapped) else ""
            rows.append(("class:text", prefix + chunk if chunk or idx == 0 else ""))
    rows.append(("class:text.dim", ellipsize(tui._t("FOOTER_HINTS"), inner_width)))

    border = "+" + "-" * (inner_width + 2) + "+"
    parts: List[Tuple[str, str]] = [("class:border", border + "\n")]
    for style, text in rows:
        parts.append(("class:border", "| "))
        parts.append((style, pad_display(text, inner_width)))
        parts.append(("class:border", " |\n"))
    parts.append(("class:border", border))
    return FormattedText(parts)


__all__ = ["DESCRIPTION_LINES", "FOOTER_HEIGHT", "build_footer_text"]
