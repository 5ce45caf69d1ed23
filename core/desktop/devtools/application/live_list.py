"""Live task list engine: snapshot → rows → selection → window, plus mutations."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence

from application.ports import TaskStore
from config import LiveListSettings
from core import STATUS_CODES, LoadError, Snapshot, Task, TaskLiveError, TaskStoreError
from core.desktop.devtools.application.navigation import NavigationController, OnSelect
from core.desktop.devtools.application.row_projector import Row, aggregate_counts, normalize_filter, project_rows
from core.desktop.devtools.application.selection import NO_SELECTION, Selection, reconcile, select_index
from core.desktop.devtools.application.watcher import SnapshotWatcher, Spawn
from core.desktop.devtools.application.windower import Window, compute_window

logger = logging.getLogger("tasklive.engine")

DEFAULT_CAPACITY = 20


class ViewState(NamedTuple):
    rows: List[Row]
    window: Window
    selection: Selection
    counts: Dict[str, Any]


@dataclass
class MutationResult:
    ok: bool
    message: str = ""
    snapshot: Optional[Snapshot] = None


def recompute(
    snapshot: Optional[Snapshot],
    status_filter: Optional[str],
    show_subtasks: bool,
    capacity: int,
    selection: Selection,
    old_rows: Sequence[Row] = (),
) -> ViewState:
    """Pure view pipeline run after every structural change."""
    tasks = snapshot.tasks if snapshot is not None else ()
    rows = project_rows(tasks, status_filter, show_subtasks)
    new_selection = reconcile(old_rows, rows, selection)
    window = compute_window(len(rows), capacity, new_selection.index)
    return ViewState(rows, window, new_selection, aggregate_counts(tasks, rows))


class LiveTaskList:
    """Session object owning the snapshot and everything derived from it.

    The render surface reads `rows`, `window`, `selection` and `counts`; all
    changes to the data go through the mutation commands, which write via the
    store and then hand the result to the watcher before applying it.
    """

    def __init__(
        self,
        store: TaskStore,
        settings: Optional[LiveListSettings] = None,
        on_select: Optional[OnSelect] = None,
        on_view_change: Optional[Callable[[ViewState], None]] = None,
        on_external_change: Optional[Callable[[Snapshot], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.settings = settings or LiveListSettings()
        self.clock = clock
        self.on_view_change = on_view_change
        self.on_external_change = on_external_change
        self.navigation = NavigationController(
            loop=self.settings.loop_navigation,
            page_size=self.settings.page_size,
            on_select=on_select,
        )
        self.snapshot: Optional[Snapshot] = None
        self.status_filter: Optional[str] = None
        self.show_subtasks = bool(self.settings.show_subtasks)
        self.capacity = DEFAULT_CAPACITY
        self.rows: List[Row] = []
        self.window = Window(0, 0)
        self.selection = NO_SELECTION
        self.counts: Dict[str, Any] = aggregate_counts(())
        self.load_error: Optional[str] = None
        self._spawn: Optional[Spawn] = None
        self.watcher = self._build_watcher()

    def _build_watcher(self) -> SnapshotWatcher:
        return SnapshotWatcher(
            fetch=self.store.get_snapshot,
            on_change=self._apply_external,
            update_throttle=self.settings.update_throttle,
            signature=getattr(self.store, "compute_signature", None),
            clock=self.clock,
        )

    # -------------------------------------------------------------- lifecycle

    def start(self) -> Snapshot:
        try:
            snapshot = self.watcher.load()
        except LoadError as exc:
            self.load_error = str(exc)
            raise
        self.load_error = None
        self.apply_snapshot(snapshot)
        return snapshot

    def start_polling(self, spawn: Optional[Spawn] = None):
        self._spawn = spawn
        return self.watcher.start(self.settings.poll_interval, spawn=spawn)

    def stop(self) -> None:
        self.watcher.stop()

    def change_project(self, store: TaskStore) -> Snapshot:
        """Swap the store and reload from scratch; polling resumes if it was running."""
        polling = self.watcher.running
        self.stop()
        self.store = store
        self.watcher = self._build_watcher()
        self.snapshot = None
        self.rows = []
        self.selection = NO_SELECTION
        snapshot = self.start()
        if polling:
            self.start_polling(self._spawn)
        return snapshot

    def refresh(self) -> MutationResult:
        try:
            self.watcher.refresh()
        except LoadError as exc:
            self.load_error = str(exc)
            return MutationResult(False, str(exc))
        except (TaskLiveError, OSError) as exc:
            return MutationResult(False, str(exc))
        self.load_error = None
        return MutationResult(True, "", self.snapshot)

    # ------------------------------------------------------------- recompute

    def apply_snapshot(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot
        self._recompute()

    def _apply_external(self, snapshot: Snapshot) -> None:
        self.apply_snapshot(snapshot)
        if self.on_external_change is not None:
            self.on_external_change(snapshot)

    def _recompute(self) -> None:
        state = recompute(self.snapshot, self.status_filter, self.show_subtasks, self.capacity, self.selection, self.rows)
        self.rows, self.window, self.selection, self.counts = state
        self._notify(state)

    def _notify(self, state: Optional[ViewState] = None) -> None:
        if self.on_view_change is None:
            return
        self.on_view_change(state or ViewState(self.rows, self.window, self.selection, self.counts))

    def set_filter(self, status: Optional[str]) -> None:
        flt = normalize_filter(status)
        if flt is not None and flt not in STATUS_CODES:
            raise ValueError(f"Unknown status filter: {status!r}")
        self.status_filter = flt
        self._recompute()

    def set_show_subtasks(self, flag: bool) -> None:
        self.show_subtasks = bool(flag)
        self._recompute()

    def toggle_subtasks(self) -> bool:
        self.set_show_subtasks(not self.show_subtasks)
        return self.show_subtasks

    def resize(self, capacity: int) -> None:
        capacity = max(1, int(capacity))
        if capacity == self.capacity:
            return
        self.capacity = capacity
        self._recompute()

    # ------------------------------------------------------------ navigation

    def _move_to(self, index: int) -> None:
        self.selection = select_index(self.rows, index) if index >= 0 else NO_SELECTION
        self.window = compute_window(len(self.rows), self.capacity, self.selection.index)
        self._notify()

    def navigate_up(self) -> None:
        self._move_to(self.navigation.navigate_up(self.selection.index, len(self.rows)))

    def navigate_down(self) -> None:
        self._move_to(self.navigation.navigate_down(self.selection.index, len(self.rows)))

    def page_up(self) -> None:
        self._move_to(self.navigation.page_up(self.selection.index, len(self.rows)))

    def page_down(self) -> None:
        self._move_to(self.navigation.page_down(self.selection.index, len(self.rows)))

    def select_index(self, index: int) -> None:
        if not self.rows:
            return
        self._move_to(index)

    def select_current(self) -> Optional[Row]:
        return self.navigation.select_current(self.rows, self.selection.index)

    @property
    def selected_row(self) -> Optional[Row]:
        if 0 <= self.selection.index < len(self.rows):
            return self.rows[self.selection.index]
        return None

    def visible_rows(self) -> List[Row]:
        return self.rows[self.window.start:self.window.end]

    @property
    def next_task(self) -> Optional[Task]:
        return self.snapshot.next_task() if self.snapshot is not None else None

    # ------------------------------------------------------------- mutations

    def _commit(self, snapshot: Snapshot) -> None:
        # Cache first so the next poll diffs against our own write.
        self.watcher.mark_applied(snapshot)
        self.apply_snapshot(snapshot)

    def mutate(self, name: str, *args, **kwargs) -> MutationResult:
        method = getattr(self.store, name)
        try:
            snapshot = method(*args, **kwargs)
        except (TaskStoreError, OSError, ValueError) as exc:
            logger.info("%s rejected: %s", name, exc)
            return MutationResult(False, str(exc))
        self._commit(snapshot)
        return MutationResult(True, "", snapshot)

    async def mutate_async(self, name: str, *args, **kwargs) -> MutationResult:
        """Run the store call in a worker thread, apply the result on the loop."""
        method = getattr(self.store, name)
        try:
            snapshot = await asyncio.to_thread(method, *args, **kwargs)
        except (TaskStoreError, OSError, ValueError) as exc:
            logger.info("%s rejected: %s", name, exc)
            return MutationResult(False, str(exc))
        self._commit(snapshot)
        return MutationResult(True, "", snapshot)

    def update_status(self, task_id, status: str) -> MutationResult:
        return self.mutate("set_status", task_id, status)

    def add_task(self, title: str, **kwargs) -> MutationResult:
        return self.mutate("add_task", title, **kwargs)

    def update_task(self, task_id, fields: Dict[str, Any]) -> MutationResult:
        return self.mutate("update_task", task_id, fields)

    def remove_task(self, task_id) -> MutationResult:
        return self.mutate("remove_task", task_id)

    def add_subtask(self, parent_id, title: str, **kwargs) -> MutationResult:
        return self.mutate("add_subtask", parent_id, title, **kwargs)

    def remove_subtask(self, parent_id, subtask_id, convert: bool = False) -> MutationResult:
        return self.mutate("remove_subtask", parent_id, subtask_id, convert=convert)

    def clear_subtasks(self, task_ids=None) -> MutationResult:
        return self.mutate("clear_subtasks", task_ids)

    def add_dependency(self, task_id, depends_on) -> MutationResult:
        return self.mutate("add_dependency", task_id, depends_on)

    def remove_dependency(self, task_id, depends_on) -> MutationResult:
        return self.mutate("remove_dependency", task_id, depends_on)


__all__ = ["DEFAULT_CAPACITY", "ViewState", "MutationResult", "recompute", "LiveTaskList"]
