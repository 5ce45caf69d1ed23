#!/usr/bin/env python3
"""
tasklive: live terminal dashboard over a shared tasks.json.

Thin facade wiring the argparse CLI to command handlers and the TUI.
"""

import argparse
import logging
import sys
from importlib.metadata import version as pkg_version, PackageNotFoundError
from typing import List, Optional

from config import load_settings
from core.desktop.devtools.interface import cli_commands as _cli
from core.desktop.devtools.interface.cli_parser import build_parser as build_cli_parser
from core.desktop.devtools.interface.i18n import translate
from infrastructure.file_repository import create_store

from .tui_app import cmd_tui, TaskDashboardTUI
from .tui_themes import THEMES, DEFAULT_THEME

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _store_for_args(args):
    tag = getattr(args, "tag", None) or load_settings().tag
    return create_store(getattr(args, "project_root", None), tag=tag)


CLI_DEPS = _cli.CliDeps(store_factory=_store_for_args, translate=translate)


def cmd_list(args) -> int:
    return _cli.cmd_list(args, CLI_DEPS)


def cmd_next(args) -> int:
    return _cli.cmd_next(args, CLI_DEPS)


def cmd_set_status(args) -> int:
    return _cli.cmd_set_status(args, CLI_DEPS)


def cmd_add(args) -> int:
    return _cli.cmd_add(args, CLI_DEPS)


def cmd_remove(args) -> int:
    return _cli.cmd_remove(args, CLI_DEPS)


def cmd_add_subtask(args) -> int:
    return _cli.cmd_add_subtask(args, CLI_DEPS)


def cmd_remove_subtask(args) -> int:
    return _cli.cmd_remove_subtask(args, CLI_DEPS)


def cmd_clear_subtasks(args) -> int:
    return _cli.cmd_clear_subtasks(args, CLI_DEPS)


def cmd_add_dependency(args) -> int:
    return _cli.cmd_add_dependency(args, CLI_DEPS)


def cmd_remove_dependency(args) -> int:
    return _cli.cmd_remove_dependency(args, CLI_DEPS)


__all__ = [
    "cmd_tui",
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
    "TaskDashboardTUI",
    "THEMES",
    "DEFAULT_THEME",
    "build_parser",
    "configure_logging",
    "main",
]


def configure_logging(log_file: Optional[str]) -> None:
    """Log to a file only on request; a full-screen UI owns the terminal otherwise."""
    if log_file:
        logging.basicConfig(filename=log_file, level=logging.DEBUG, format=LOG_FORMAT)
        return
    root = logging.getLogger("tasklive")
    if not any(isinstance(h, logging.NullHandler) for h in root.handlers):
        root.addHandler(logging.NullHandler())


def build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = build_cli_parser(commands=sys.modules[__name__], themes=THEMES, default_theme=DEFAULT_THEME)
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "version", False):
        try:
            print(pkg_version("tasklive"))
        except PackageNotFoundError:
            print("0.0.0")
        return 0
    configure_logging(getattr(args, "log_file", None))
    if not getattr(args, "command", None):
        args = parser.parse_args([*(argv if argv is not None else sys.argv[1:]), "tui"])
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
