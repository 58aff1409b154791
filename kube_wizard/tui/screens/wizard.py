"""WizardScreen — renders WizardState and feeds key presses to dispatch()."""

from __future__ import annotations

import asyncio
import logging

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Input, Static

from ...constants import HOTKEY_KEYS
from ...wizard import events as ev
from ...wizard.machine import dispatch
from ...wizard.menus import input_placeholder, key_hint, menu_for, screen_title
from ...wizard.runner import TaskRunner
from ...wizard.state import (
    INPUT_SCREENS,
    TEXT_SCREENS,
    Screen as WizardPage,
    StatusLevel,
    WizardState,
)
from ...wizard.tasks import Task
from ..widgets.header import WizardHeader
from ..widgets.log_panel import LogPanel
from ..widgets.menu_list import MenuList
from ..widgets.output_viewer import OutputViewer
from ..widgets.status_bar import StatusBar

logger = logging.getLogger(__name__)

_NOTIFY_SEVERITY = {
    StatusLevel.INFO: "information",
    StatusLevel.SUCCESS: "information",
    StatusLevel.ERROR: "error",
}


def _text_for(state: WizardState) -> str:
    if state.screen is WizardPage.HOTKEY_BIND:
        fav = state.hotkey_favourite
        name = fav.name if fav else ""
        return f"Press a function key (F1-F12) to bind '{name}'.\n\nEsc cancels."
    return state.output


class WizardScreen(Screen):
    """Single screen that re-renders itself from the wizard state."""

    BINDINGS = [
        Binding("escape", "back", "Back"),
        Binding("space", "toggle", "Toggle", show=False),
        Binding("left", "navigate(-1)", "Prev", show=False),
        Binding("right", "navigate(1)", "Next", show=False),
        Binding("q", "key('q')", "Main Menu", show=False),
        Binding("d", "key('d')", "Delete", show=False),
        Binding("r", "key('r')", "Rename", show=False),
        Binding("s", "key('s')", "Save", show=False),
        Binding("h", "key('h')", "Hotkey", show=False),
    ] + [
        Binding(key.lower(), f"key('{key}')", key, show=False, priority=True)
        for key in HOTKEY_KEYS
    ]

    def __init__(self, runner: TaskRunner, state: WizardState, **kwargs) -> None:
        super().__init__(**kwargs)
        self._runner = runner
        self._state = state
        self._busy = False
        self._rendered_screen: WizardPage | None = None

    def compose(self) -> ComposeResult:
        yield WizardHeader(id="wizard-header")
        with Vertical(id="wizard-content"):
            yield Static("", id="wizard-preview")
            yield MenuList(id="wizard-menu")
            yield Input(id="wizard-input")
            yield OutputViewer(id="wizard-output")
        yield LogPanel(id="wizard-log")
        yield StatusBar(id="wizard-status")

    async def on_mount(self) -> None:
        self._render_state(None)
        await self._send(ev.Started())

    @property
    def wizard_state(self) -> WizardState:
        return self._state

    # ── Event plumbing ───────────────────────────────────────────

    async def _send(self, event: ev.Event) -> None:
        """Dispatch event, then run each resulting task off the event loop."""
        queue: list[ev.Event] = [event]
        while queue:
            previous = self._state
            self._state, tasks = dispatch(self._state, queue.pop(0))
            self._render_state(previous)
            if self._state.quit:
                self.app.exit()
                return
            for task in tasks:
                queue.append(await self._run_task(task))

    async def _run_task(self, task: Task) -> ev.CompletionEvent:
        self._busy = True
        self.query_one("#wizard-status", StatusBar).operation = "Working..."
        try:
            return await asyncio.to_thread(self._runner.run, task)
        finally:
            self._busy = False
            self.query_one("#wizard-status", StatusBar).operation = ""

    def _highlighted(self) -> int:
        return self.query_one("#wizard-menu", MenuList).highlighted

    # ── Rendering ────────────────────────────────────────────────

    def _render_state(self, previous: WizardState | None) -> None:
        state = self._state
        page = state.screen
        changed = page is not self._rendered_screen

        header = self.query_one("#wizard-header", WizardHeader)
        header.screen_title = screen_title(state)
        header.context_name = state.current_context
        header.namespace = state.default_namespace

        status_bar = self.query_one("#wizard-status", StatusBar)
        status_bar.hint = key_hint(state)

        preview = self.query_one("#wizard-preview", Static)
        menu = self.query_one("#wizard-menu", MenuList)
        field = self.query_one("#wizard-input", Input)
        viewer = self.query_one("#wizard-output", OutputViewer)

        show_preview = page in (WizardPage.COMMAND_PREVIEW, WizardPage.SAVE_FAVOURITE)
        preview.display = show_preview
        if show_preview:
            preview.update(Text(f"$ {state.selections.command}", style="bold #00ffcc"))

        entries = menu_for(state)
        menu.display = bool(entries)
        field.display = page in INPUT_SCREENS
        viewer.display = page in TEXT_SCREENS

        if entries:
            if page is WizardPage.SAVED_OUTPUT_VERSIONS:
                cursor = state.version_index
            elif changed:
                cursor = 0
            else:
                cursor = menu.highlighted
            menu.show(entries, cursor)
            if changed:
                menu.focus_list()
        elif page in INPUT_SCREENS:
            if changed:
                field.placeholder = input_placeholder(state)
                field.value = state.input_value
                field.cursor_position = len(state.input_value)
                field.focus()
        elif page in TEXT_SCREENS:
            if changed or previous is None or previous.output != state.output:
                viewer.display_text(_text_for(state))
            if changed:
                viewer.focus_content()

        self._rendered_screen = page
        self._report_status(previous)

    def _report_status(self, previous: WizardState | None) -> None:
        status = self._state.status
        status_bar = self.query_one("#wizard-status", StatusBar)
        if status is None:
            status_bar.message = ""
            return
        if previous is not None and previous.status is status:
            return
        status_bar.message = status.text
        status_bar.level = status.level.value

        self.query_one("#wizard-log", LogPanel).record(status, screen_title(self._state))
        self.notify(status.text, severity=_NOTIFY_SEVERITY[status.level])

    # ── Input ────────────────────────────────────────────────────

    async def on_menu_list_selected(self, event: MenuList.Selected) -> None:
        await self._send(ev.Confirm(index=event.index))

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        await self._send(ev.Confirm(text=event.value))

    async def action_back(self) -> None:
        await self._send(ev.Back())

    async def action_toggle(self) -> None:
        await self._send(ev.Toggle(index=self._highlighted()))

    async def action_navigate(self, step: int) -> None:
        if self._state.screen is not WizardPage.SAVED_OUTPUT_VERSIONS:
            return
        await self._send(ev.Navigate(step=step))

    async def action_key(self, key: str) -> None:
        if self._busy:
            logger.debug("Ignoring %s while busy", key)
            return
        await self._send(ev.KeyPressed(key=key, index=self._highlighted()))
