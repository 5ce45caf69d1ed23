import json
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from application.ports import TaskStore
from core import LoadError, Snapshot, TaskStoreError, id_key, status_symbol
from core.desktop.devtools.application.row_projector import Row, aggregate_counts, matches_filter, project_rows


StoreFactory = Callable[[Any], TaskStore]
Translate = Callable[..., str]


@dataclass
class CliDeps:
    store_factory: StoreFactory
    translate: Translate


def emit_json(command: str, *, ok: bool = True, message: str = "", payload: Optional[Dict[str, Any]] = None) -> int:
    """Print the `--json` envelope and return the matching exit code."""
    body = {
        "command": command,
        "status": "OK" if ok else "ERROR",
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "payload": payload or {},
    }
    print(json.dumps(body, ensure_ascii=False, indent=2))
    return 0 if ok else 1


def _fail(args, command: str, message: str) -> int:
    if getattr(args, "json", False):
        return emit_json(command, ok=False, message=message)
    print(message, file=sys.stderr)
    return 1


def _split_ids(raw: str) -> List[str]:
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


def format_row_line(row: Row) -> str:
    indent = "    " * row.depth
    line = f"{indent}{status_symbol(row.status)} {row.label:<6} {row.title}"
    if not row.is_subtask and row.task is not None:
        line += f"  [{row.task.priority}]"
    deps = getattr(row.item, "dependencies", None) or []
    if deps:
        line += f"  ← {','.join(id_key(d) for d in deps)}"
    return line


def cmd_list(args, deps: CliDeps) -> int:
    try:
        snapshot = deps.store_factory(args).get_snapshot()
    except (LoadError, TaskStoreError) as exc:
        return _fail(args, "list", deps.translate("ERR_LOAD", error=exc))
    status = getattr(args, "status", None)
    rows = project_rows(snapshot.tasks, status, not getattr(args, "no_subtasks", False))
    counts = aggregate_counts(snapshot.tasks, rows)
    if getattr(args, "json", False):
        tasks = [t.to_dict() for t in snapshot.tasks if matches_filter(t, status)]
        return emit_json("list", payload={"tasks": tasks, "counts": counts})
    if not rows:
        print(deps.translate("CLI_LIST_EMPTY"))
        return 0
    for row in rows:
        print(format_row_line(row))
    print(
        f"\n{deps.translate('STATUS_TASKS_COUNT', count=counts['total'])} · "
        f"{deps.translate('STATUS_COMPLETION', percent=counts['completion'])} · "
        f"{deps.translate('STATUS_SUBTASKS_COUNT', done=counts['subtasks_done'], total=counts['subtasks_total'])}"
    )
    return 0


def cmd_next(args, deps: CliDeps) -> int:
    try:
        task = deps.store_factory(args).find_next_task()
    except (LoadError, TaskStoreError) as exc:
        return _fail(args, "next", deps.translate("ERR_LOAD", error=exc))
    if getattr(args, "json", False):
        return emit_json("next", payload={"task": task.to_dict() if task else None})
    if task is None:
        print(deps.translate("CLI_NO_NEXT"))
        return 0
    print(deps.translate("CLI_NEXT", id=id_key(task.id), title=task.title, priority=task.priority))
    return 0


def _mutate(args, deps: CliDeps, command: str, action: Callable[[TaskStore], Snapshot], message: str) -> int:
    try:
        store = deps.store_factory(args)
        snapshot = action(store)
    except (LoadError, TaskStoreError) as exc:
        return _fail(args, command, str(exc))
    if getattr(args, "json", False):
        return emit_json(command, message=message, payload={"total_tasks": len(snapshot)})
    print(deps.translate("CLI_DONE", message=message))
    return 0


def cmd_set_status(args, deps: CliDeps) -> int:
    return _mutate(
        args,
        deps,
        "set-status",
        lambda store: store.set_status(args.task_id, args.status),
        f"{args.task_id} → {args.status}",
    )


def cmd_add(args, deps: CliDeps) -> int:
    return _mutate(
        args,
        deps,
        "add",
        lambda store: store.add_task(
            args.title,
            description=getattr(args, "description", "") or "",
            priority=getattr(args, "priority", "medium") or "medium",
            dependencies=_split_ids(getattr(args, "depends", "") or ""),
            details=getattr(args, "details", "") or "",
        ),
        f"added {args.title!r}",
    )


def cmd_remove(args, deps: CliDeps) -> int:
    return _mutate(args, deps, "remove", lambda store: store.remove_task(args.task_id), f"removed {args.task_id}")


def cmd_add_subtask(args, deps: CliDeps) -> int:
    return _mutate(
        args,
        deps,
        "add-subtask",
        lambda store: store.add_subtask(args.parent_id, args.title, description=getattr(args, "description", "") or ""),
        f"added subtask {args.title!r} to {args.parent_id}",
    )


def cmd_remove_subtask(args, deps: CliDeps) -> int:
    parent_id, _, subtask_id = str(args.subtask_ref).partition(".")
    if not subtask_id:
        return _fail(args, "remove-subtask", f"Expected PARENT.SUBTASK, got {args.subtask_ref!r}")
    convert = bool(getattr(args, "convert", False))
    return _mutate(
        args,
        deps,
        "remove-subtask",
        lambda store: store.remove_subtask(parent_id, subtask_id, convert=convert),
        f"{'converted' if convert else 'removed'} subtask {args.subtask_ref}",
    )


def cmd_clear_subtasks(args, deps: CliDeps) -> int:
    ids = _split_ids(getattr(args, "ids", "") or "") or None
    return _mutate(args, deps, "clear-subtasks", lambda store: store.clear_subtasks(ids), "subtasks cleared")


def cmd_add_dependency(args, deps: CliDeps) -> int:
    return _mutate(
        args,
        deps,
        "add-dep",
        lambda store: store.add_dependency(args.task_id, args.depends_on),
        f"{args.task_id} now depends on {args.depends_on}",
    )


def cmd_remove_dependency(args, deps: CliDeps) -> int:
    return _mutate(
        args,
        deps,
        "remove-dep",
        lambda store: store.remove_dependency(args.task_id, args.depends_on),
        f"{args.task_id} no longer depends on {args.depends_on}",
    )


__all__ = [
    "CliDeps",
    "emit_json",
    "format_row_line",
    "cmd_list",
    "cmd_next",
    "cmd_set_status",
    "cmd_add",
    "cmd_remove",
    "cmd_add_subtask",
    "cmd_remove_subtask",
    "cmd_clear_subtasks",
    "cmd_add_dependency",
    "cmd_remove_dependency",
]
