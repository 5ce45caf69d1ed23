"""Selection reconciliation across structural changes of the row sequence."""

from dataclasses import dataclass
from typing import Optional, Sequence

from core.desktop.devtools.application.row_projector import Identity, Row


@dataclass(frozen=True)
class Selection:
    """`index` drives rendering, `identity` drives reconciliation."""

    index: int = -1
    identity: Optional[Identity] = None

    @property
    def empty(self) -> bool:
        return self.index < 0


NO_SELECTION = Selection(-1, None)


def identity_of(row: Optional[Row]) -> Optional[Identity]:
    return row.identity if row is not None else None


def select_index(rows: Sequence[Row], index: int) -> Selection:
    """Point the selection at `index` (clamped) and remember that row's identity."""
    if not rows:
        return NO_SELECTION
    idx = max(0, min(int(index), len(rows) - 1))
    return Selection(idx, rows[idx].identity)


def find_identity(rows: Sequence[Row], identity: Optional[Identity]) -> int:
    if identity is None:
        return -1
    for pos, row in enumerate(rows):
        if row.identity == identity:
            return pos
    return -1


def reconcile(old_rows: Sequence[Row], new_rows: Sequence[Row], selection: Selection) -> Selection:
    """Relocate `selection` onto `new_rows`.

    Single pass: the identity is looked up linearly; when it is gone the old
    index is clamped and the identity of whatever row sits there is adopted.
    Never notifies anybody about the move.
    """
    if not new_rows:
        return NO_SELECTION
    identity = selection.identity
    if identity is None and 0 <= selection.index < len(old_rows):
        identity = old_rows[selection.index].identity
    pos = find_identity(new_rows, identity)
    if pos >= 0:
        return Selection(pos, identity)
    return select_index(new_rows, max(selection.index, 0))


__all__ = ["Selection", "NO_SELECTION", "identity_of", "select_index", "find_identity", "reconcile"]
