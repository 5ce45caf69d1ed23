"""Visible slice computation for the task list."""

from typing import NamedTuple


class Window(NamedTuple):
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def contains(self, index: int) -> bool:
        return self.start <= index < self.end

    def hidden_above(self) -> int:
        return self.start

    def hidden_below(self, total: int) -> int:
        return max(0, total - self.end)


def compute_window(total_rows: int, capacity: int, index: int) -> Window:
    """Centre the window on `index`, clamped so it never runs past either end."""
    total = max(0, int(total_rows))
    capacity = max(1, int(capacity))
    if total <= capacity:
        return Window(0, total)
    start = index - capacity // 2
    start = max(0, min(start, total - capacity))
    return Window(start, capacity)


__all__ = ["Window", "compute_window"]
