"""Display-width helpers for terminal rows (wide and combining characters)."""

from typing import List

from wcwidth import wcwidth


def char_width(ch: str) -> int:
    w = wcwidth(ch)
    if w is None or w < 0:
        return 0
    return w


def display_width(text: str) -> int:
    """Return visual width of text accounting for wide/narrow characters."""
    return sum(char_width(ch) for ch in text)


def trim_display(text: str, width: int) -> str:
    """Trim text so visible width doesn't exceed specified width."""
    acc = []
    used = 0
    for ch in text:
        w = char_width(ch)
        if used + w > width:
            break
        acc.append(ch)
        used += w
    return "".join(acc)


def ellipsize(text: str, width: int) -> str:
    """Trim to `width` columns, marking the cut with an ellipsis."""
    if width <= 0:
        return ""
    if display_width(text) <= width:
        return text
    return trim_display(text, width - 1) + "…"


def pad_display(text: str, width: int) -> str:
    """Trim and pad with spaces to exact visible width."""
    trimmed = trim_display(text, width)
    return trimmed + " " * max(0, width - display_width(trimmed))


def _split_word(word: str, width: int) -> List[str]:
    chunks: List[str] = []
    while display_width(word) > width:
        head = trim_display(word, width) or word[0]
        chunks.append(head)
        word = word[len(head):]
    chunks.append(word)
    return chunks


def wrap_display(text: str, width: int, max_lines: int = 0) -> List[str]:
    """Greedy word wrap on visible width; with `max_lines` the last line is ellipsized."""
    width = max(1, width)
    lines: List[str] = []
    current = ""
    for word in text.split():
        for chunk in _split_word(word, width):
            candidate = f"{current} {chunk}" if current else chunk
            if display_width(candidate) <= width:
                current = candidate
                continue
            if current:
                lines.append(current)
            current = chunk
    if current:
        lines.append(current)
    if max_lines and len(lines) > max_lines:
        lines = lines[:max_lines]
        lines[-1] = ellipsize(lines[-1] + "…", width)
    return lines


__all__ = ["char_width", "display_width", "trim_display", "ellipsize", "pad_display", "wrap_display"]
