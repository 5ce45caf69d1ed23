"""Cursor transitions over the row sequence (up/down/page/select)."""

from typing import Callable, Optional, Sequence

from core.desktop.devtools.application.row_projector import Row

DEFAULT_PAGE_SIZE = 10

OnSelect = Callable[[Row, int], None]


class NavigationController:
    """Stateless transitions: every call takes the current index and row count.

    `-1` is returned for an empty sequence. The controller never reconciles;
    callers pair the new index with its row identity themselves.
    """

    def __init__(self, loop: bool = True, page_size: int = DEFAULT_PAGE_SIZE, on_select: Optional[OnSelect] = None):
        self.loop = bool(loop)
        self.page_size = max(1, int(page_size))
        self.on_select = on_select

    @staticmethod
    def _clamp(index: int, total: int) -> int:
        return max(0, min(index, total - 1))

    def navigate_up(self, index: int, total: int) -> int:
        if total <= 0:
            return -1
        if index <= 0:
            return total - 1 if self.loop else 0
        return self._clamp(index - 1, total)

    def navigate_down(self, index: int, total: int) -> int:
        if total <= 0:
            return -1
        if index >= total - 1:
            return 0 if self.loop else total - 1
        return self._clamp(index + 1, total)

    def page_up(self, index: int, total: int) -> int:
        if total <= 0:
            return -1
        return self._clamp(index - self.page_size, total)

    def page_down(self, index: int, total: int) -> int:
        if total <= 0:
            return -1
        return self._clamp(index + self.page_size, total)

    def select_current(self, rows: Sequence[Row], index: int) -> Optional[Row]:
        if not rows or not (0 <= index < len(rows)):
            return None
        row = rows[index]
        if self.on_select is not None:
            self.on_select(row, index)
        return row


__all__ = ["DEFAULT_PAGE_SIZE", "NavigationController"]
