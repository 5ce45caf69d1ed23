#!/usr/bin/env python3
"""TUI application - TaskDashboardTUI class and cmd_tui command."""

import logging
import os
import sys
import time
from typing import Dict, Optional

from config import LiveListSettings, get_tui_ttimeoutlen, load_settings
from core import LoadError, Snapshot
from core.desktop.devtools.application.live_list import LiveTaskList, MutationResult
from core.desktop.devtools.application.row_projector import Row
from core.desktop.devtools.interface.i18n import effective_lang, filter_label, translate
from core.desktop.devtools.interface.tui_actions import (
    apply_quick_filter,
    cycle_filter,
    cycle_row_status,
    refresh_now,
    toggle_subtasks,
)
from core.desktop.devtools.interface.tui_footer import FOOTER_HEIGHT, build_footer_text
from core.desktop.devtools.interface.tui_mouse import TaskListControl
from core.desktop.devtools.interface.tui_navigation import jump_to_edge, move_page, move_vertical_selection
from core.desktop.devtools.interface.tui_render import INDICATOR_LINES, render_task_list_text
from core.desktop.devtools.interface.tui_status import build_status_text
from infrastructure.file_repository import create_store

from prompt_toolkit.application import Application
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.styles import Style

from .tui_themes import DEFAULT_THEME, THEMES, build_style, get_theme_palette

logger = logging.getLogger("tasklive.tui")

STATUS_BAR_HEIGHT = 1


class TaskDashboardTUI:
    @staticmethod
    def get_theme_palette(theme: str) -> Dict[str, str]:
        return get_theme_palette(theme)

    @classmethod
    def build_style(cls, theme: str) -> Style:
        return build_style(theme)

    def __init__(
        self,
        store,
        settings: Optional[LiveListSettings] = None,
        theme: Optional[str] = None,
        mono_select: bool = False,
        clock=time.monotonic,
    ):
        self.settings = settings or load_settings()
        self.store = store
        self.clock = clock
        self.engine = LiveTaskList(
            store,
            self.settings,
            on_select=self._on_row_selected,
            on_view_change=lambda _state: self.force_render(),
            on_external_change=self._on_external_change,
            clock=clock,
        )
        self.theme_name = theme if theme in THEMES else (self.settings.theme if self.settings.theme in THEMES else DEFAULT_THEME)
        self.mono_select = mono_select
        self.language = effective_lang(self.settings.lang)
        self.status_message: str = ""
        self.status_message_expires: float = 0.0
        self._last_input_at: Optional[float] = None
        self._last_filter_value: Optional[str] = None
        self._filter_flash_until: float = 0.0
        self.style = self.build_style(self.theme_name)

        kb = KeyBindings()
        kb.timeout = 0

        @kb.add("q")
        @kb.add("й")
        @kb.add("c-c")
        def _(event):
            """q - exit"""
            event.app.exit()

        @kb.add("up")
        @kb.add("k")
        @kb.add("л")
        def _(event):
            if self.accept_input():
                self.move_vertical_selection(-1)

        @kb.add("down")
        @kb.add("j")
        @kb.add("о")
        def _(event):
            if self.accept_input():
                self.move_vertical_selection(1)

        @kb.add(Keys.ScrollUp)
        def _(event):
            if self.accept_input():
                self.move_vertical_selection(-1)

        @kb.add(Keys.ScrollDown)
        def _(event):
            if self.accept_input():
                self.move_vertical_selection(1)

        @kb.add("pageup")
        @kb.add("c-u")
        def _(event):
            if self.accept_input():
                move_page(self, -1)

        @kb.add("pagedown")
        @kb.add("c-d")
        def _(event):
            if self.accept_input():
                move_page(self, 1)

        @kb.add("home")
        def _(event):
            jump_to_edge(self, end=False)

        @kb.add("end")
        def _(event):
            jump_to_edge(self, end=True)

        @kb.add("enter")
        @kb.add("space")
        def _(event):
            """Enter/Space - advance status of the selected row"""
            if self.accept_input():
                self.engine.select_current()

        @kb.add("tab")
        def _(event):
            toggle_subtasks(self)

        for key in ("1", "2", "3", "4"):
            kb.add(key)(lambda event, key=key: apply_quick_filter(self, key))

        @kb.add("f")
        @kb.add("а")
        def _(event):
            cycle_filter(self, 1)

        @kb.add("F")
        @kb.add("А")
        def _(event):
            cycle_filter(self, -1)

        @kb.add("r")
        @kb.add("к")
        def _(event):
            refresh_now(self)

        self.status_bar = Window(content=FormattedTextControl(self.get_status_text), height=STATUS_BAR_HEIGHT, always_hide_cursor=True)
        self.body_control = TaskListControl(self)
        self.main_window = Window(content=self.body_control, always_hide_cursor=True, wrap_lines=False)
        self.footer = Window(
            content=FormattedTextControl(self.get_footer_text),
            height=Dimension(min=FOOTER_HEIGHT, max=FOOTER_HEIGHT),
            always_hide_cursor=True,
        )
        root = HSplit([self.status_bar, self.main_window, self.footer])

        self.app = Application(
            layout=Layout(root),
            key_bindings=kb,
            style=self.style,
            full_screen=True,
            mouse_support=True,
            refresh_interval=1.0,
            before_render=lambda _app: self.sync_viewport(),
        )
        # Esc/arrow disambiguation latency; override for slow terminals/SSH sessions.
        self.app.ttimeoutlen = get_tui_ttimeoutlen(0.05)

    @staticmethod
    def get_terminal_width() -> int:
        """Get current terminal width, default to 100 if unavailable."""
        try:
            return os.get_terminal_size().columns
        except (AttributeError, ValueError, OSError):
            return 100

    @staticmethod
    def get_terminal_height() -> int:
        try:
            return os.get_terminal_size().lines
        except (AttributeError, ValueError, OSError):
            return 40

    def _t(self, key: str, **kwargs) -> str:
        return translate(key, lang=self.language, **kwargs)

    def force_render(self) -> None:
        app = getattr(self, "app", None)
        if app:
            app.invalidate()

    def accept_input(self, now: Optional[float] = None) -> bool:
        """Raw input throttle: drop key repeats closer than `input_throttle`."""
        now = self.clock() if now is None else now
        last = self._last_input_at
        if last is not None and now - last < self.settings.input_throttle:
            return False
        self._last_input_at = now
        return True

    def _visible_row_limit(self) -> int:
        total = self.get_terminal_height()
        usable = total - (STATUS_BAR_HEIGHT + FOOTER_HEIGHT + INDICATOR_LINES)
        return max(1, usable)

    def sync_viewport(self) -> None:
        self.engine.resize(self._visible_row_limit())

    def set_status_message(self, message: str, ttl: float = 4.0) -> None:
        self.status_message = message
        self.status_message_expires = time.time() + ttl

    def filter_display(self) -> str:
        return filter_label(self.engine.status_filter, lang=self.language)

    def project_name(self) -> str:
        root = getattr(self.store, "project_root", None)
        return root.name if root is not None else ""

    def move_vertical_selection(self, delta: int) -> None:
        move_vertical_selection(self, delta)

    def get_status_text(self) -> FormattedText:
        return build_status_text(self)

    def get_task_list_text(self) -> FormattedText:
        return render_task_list_text(self)

    def get_footer_text(self) -> FormattedText:
        return build_footer_text(self)

    def _on_row_selected(self, row: Row, index: int) -> None:
        cycle_row_status(self, row)

    def _on_external_change(self, snapshot: Snapshot) -> None:
        self.set_status_message(self._t("STATUS_MESSAGE_UPDATED"), ttl=2)

    def _report(self, result: MutationResult, success: str) -> None:
        if result.ok:
            if success:
                self.set_status_message(success, ttl=3)
        else:
            self.set_status_message(self._t("ERR_MUTATION", error=result.message), ttl=6)
        self.force_render()

    def run_mutation(self, name: str, *args, success: str = "", **kwargs) -> None:
        """Run a store command; off the UI thread while the app is running."""
        if self.app.is_running:

            async def _mutate() -> None:
                result = await self.engine.mutate_async(name, *args, **kwargs)
                self._report(result, success)

            self.app.create_background_task(_mutate())
            return
        self._report(self.engine.mutate(name, *args, **kwargs), success)

    def ensure_polling(self) -> None:
        if self.app.is_running:
            self._start_polling()

    def _start_polling(self) -> None:
        if self.engine.load_error or self.engine.watcher.running:
            return
        self.engine.start_polling(spawn=self.app.create_background_task)

    def load(self) -> bool:
        try:
            self.engine.start()
        except LoadError as exc:
            logger.warning("dashboard started without data: %s", exc)
            self.set_status_message(self._t("ERR_LOAD", error=exc), ttl=10)
            return False
        return True

    def run(self) -> int:
        self.load()
        try:
            self.app.run(pre_run=self._start_polling)
        finally:
            self.engine.stop()
        return 1 if self.engine.load_error else 0


def cmd_tui(args) -> int:
    overrides = {}
    if getattr(args, "interval", None):
        overrides["poll_interval"] = args.interval
    if getattr(args, "no_subtasks", False):
        overrides["show_subtasks"] = False
    settings = load_settings(overrides)
    try:
        store = create_store(getattr(args, "project_root", None), tag=getattr(args, "tag", None) or settings.tag)
    except LoadError as exc:
        print(translate("ERR_LOAD", error=exc), file=sys.stderr)
        return 1
    tui = TaskDashboardTUI(
        store,
        settings=settings,
        theme=getattr(args, "theme", None),
        mono_select=getattr(args, "mono_select", False),
    )
    return tui.run()
