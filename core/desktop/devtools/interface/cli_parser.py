"""CLI parser construction for the tasklive CLI/TUI."""

import argparse
from typing import Any, Mapping

from core import STATUS_CODES

FILTER_CHOICES = ["all", *STATUS_CODES]


def build_parser(commands: Any, themes: Mapping[str, Any], default_theme: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tasklive",
        description="tasklive: live terminal dashboard for tasks.json task lists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--project-root", dest="project_root", help="project directory (default: nearest parent with .taskmaster/ or tasks.json)")
    parser.add_argument("--tag", help="tag section of a tagged tasks.json (default: master)")
    parser.add_argument("--log-file", dest="log_file", help="write debug logs to this file")

    def add_json_arg(sp):
        sp.add_argument("--json", action="store_true", help="structured JSON output")
        return sp

    sub = parser.add_subparsers(dest="command", help="Commands")

    # tui
    tui_p = sub.add_parser("tui", help="Start the live dashboard (default)")
    tui_p.add_argument("--theme", choices=list(themes.keys()), default=None, help=f"colour palette (default: {default_theme})")
    tui_p.add_argument("--mono-select", action="store_true", help="monochrome selection highlight")
    tui_p.add_argument("--no-subtasks", action="store_true", help="start with subtasks hidden")
    tui_p.add_argument("--interval", type=float, help="poll interval in seconds")
    tui_p.set_defaults(func=commands.cmd_tui)

    # list
    lp = sub.add_parser("list", help="Print the task list")
    lp.add_argument("--status", choices=FILTER_CHOICES, default="all")
    lp.add_argument("--no-subtasks", action="store_true")
    add_json_arg(lp)
    lp.set_defaults(func=commands.cmd_list)

    # next
    np_ = sub.add_parser("next", help="Show the next eligible task")
    add_json_arg(np_)
    np_.set_defaults(func=commands.cmd_next)

    # set-status
    ssp = sub.add_parser("set-status", help="Set status of tasks/subtasks (ids: 3, 3.2 or 3,4)")
    ssp.add_argument("task_id")
    ssp.add_argument("status")
    add_json_arg(ssp)
    ssp.set_defaults(func=commands.cmd_set_status)

    # add
    ap = sub.add_parser("add", help="Add a task")
    ap.add_argument("title")
    ap.add_argument("--description", "-d", default="")
    ap.add_argument("--priority", choices=["high", "medium", "low"], default="medium")
    ap.add_argument("--depends", default="", help="comma separated task ids")
    ap.add_argument("--details", default="")
    add_json_arg(ap)
    ap.set_defaults(func=commands.cmd_add)

    # remove
    rp = sub.add_parser("remove", help="Remove a task (or a subtask as PARENT.SUB)")
    rp.add_argument("task_id")
    add_json_arg(rp)
    rp.set_defaults(func=commands.cmd_remove)

    # add-subtask
    asp = sub.add_parser("add-subtask", help="Add a subtask")
    asp.add_argument("parent_id")
    asp.add_argument("title")
    asp.add_argument("--description", "-d", default="")
    add_json_arg(asp)
    asp.set_defaults(func=commands.cmd_add_subtask)

    # remove-subtask
    rsp = sub.add_parser("remove-subtask", help="Remove a subtask PARENT.SUB")
    rsp.add_argument("subtask_ref")
    rsp.add_argument("--convert", action="store_true", help="promote the subtask to a standalone task")
    add_json_arg(rsp)
    rsp.set_defaults(func=commands.cmd_remove_subtask)

    # clear-subtasks
    csp = sub.add_parser("clear-subtasks", help="Remove all subtasks (of the given tasks)")
    csp.add_argument("--ids", default="", help="comma separated task ids (default: all)")
    add_json_arg(csp)
    csp.set_defaults(func=commands.cmd_clear_subtasks)

    # add-dep / remove-dep
    adp = sub.add_parser("add-dep", help="Add a dependency")
    adp.add_argument("task_id")
    adp.add_argument("depends_on")
    add_json_arg(adp)
    adp.set_defaults(func=commands.cmd_add_dependency)

    rdp = sub.add_parser("remove-dep", help="Remove a dependency")
    rdp.add_argument("task_id")
    rdp.add_argument("depends_on")
    add_json_arg(rdp)
    rdp.set_defaults(func=commands.cmd_remove_dependency)

    return parser
