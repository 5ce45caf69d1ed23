class TaskLiveError(Exception):
    """Base error for the live task dashboard."""


class LoadError(TaskLiveError):
    """Initial snapshot could not be loaded (missing project, unreadable store)."""


class TaskStoreError(TaskLiveError, ValueError):
    """Store rejected a read or a mutation; nothing was written."""
