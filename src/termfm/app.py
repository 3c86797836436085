"""
Textual host for the controller.

The app translates Textual events into controller events, keeps the current
model in a reactive attribute, repaints from ``render`` whenever it changes,
and runs dispatcher jobs on daemon threads whose completions come back as
posted messages on the same event loop.
"""

import logging
import threading
from typing import Callable

from rich.text import Text
from textual import events, on
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import Header, Static

from .config import Settings
from .controller import Controller, Model
from .dispatcher import CommandDispatcher
from .entries import Listing
from .events import CompletionEvent, Event, KeyInput, Resize, ScrollInput
from .filestore import FileStore
from .modes import KeyMap
from .render import Frame, render

logger = logging.getLogger(__name__)


class JobFinished(Message):
    """A dispatcher job completed; carries its completion event."""

    def __init__(self, event: CompletionEvent) -> None:
        super().__init__()
        self.event = event


class StatusBar(Static):
    message: reactive[Text] = reactive(Text(""))

    def render(self) -> Text:
        return self.message


class FileManagerApp(App, inherit_bindings=False):
    """termfm - terminal file browser."""

    TITLE = "termfm"
    SUB_TITLE = "File Manager"
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen { layout: vertical; }

    #path_bar {
        height: 1; background: $primary-darken-3;
        color: $text; padding: 0 1; text-style: bold;
    }

    #main_container { layout: horizontal; height: 1fr; }

    #listing_pane {
        width: 1fr; height: 1fr;
        border: solid $primary;
    }

    #preview_pane {
        width: 1fr; height: 1fr;
        border: solid $primary-darken-2;
        overflow: hidden;
    }

    #status_bar {
        height: 1; background: $surface-darken-1;
    }
    """

    model: reactive[Model | None] = reactive(None, init=False)

    def __init__(
        self,
        listing: Listing,
        settings: Settings | None = None,
        store: FileStore | None = None,
        keymap: KeyMap | None = None,
    ):
        super().__init__()
        self.settings = settings or Settings()
        self.keymap = keymap or KeyMap()
        self.controller = Controller(self.keymap, mouse_wheel=self.settings.enable_mousewheel)
        self.store = store or FileStore(show_hidden=self.settings.show_hidden)
        self.dispatcher = CommandDispatcher(
            self.store,
            submit=self._run_in_thread,
            deliver=self._deliver,
            preview_limit=self.settings.preview_max_bytes,
        )
        self._initial_listing = listing

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="path_bar")
        with Container(id="main_container"):
            yield Static("", id="listing_pane")
            yield Static("", id="preview_pane")
        yield StatusBar("", id="status_bar")

    def on_mount(self) -> None:
        self.model = Model(listing=self._initial_listing)
        self.apply_event(Resize(self.size.width, self.size.height))

    # ──────────── Controller plumbing ────────────

    def apply_event(self, event: Event) -> None:
        if self.model is None:
            return
        model, jobs = self.controller.apply(event, self.model)
        self.model = model
        for job in jobs:
            self.dispatcher.dispatch(job)

    def watch_model(self, model: Model | None) -> None:
        if model is None:
            return
        if model.quitting:
            self.exit(return_code=0)
            return
        self._paint(
            render(
                model,
                self.keymap,
                show_icons=self.settings.show_icons,
                highlight=self.settings.syntax_highlight,
            )
        )

    def _paint(self, frame: Frame) -> None:
        self.query_one("#path_bar", Static).update(frame.path_bar)
        self.query_one("#listing_pane", Static).update(frame.listing)
        self.query_one("#preview_pane", Static).update(frame.preview)
        self.query_one("#status_bar", StatusBar).message = frame.status

    # ──────────── Jobs ────────────

    def _run_in_thread(self, task: Callable[[], None]) -> None:
        # Daemon: exiting the app must not wait for a running job.
        threading.Thread(target=task, name="termfm-job", daemon=True).start()

    def _deliver(self, event: CompletionEvent) -> None:
        # post_message is thread safe and returns False once the app is closing;
        # after the loop itself has closed it raises RuntimeError instead.
        try:
            delivered = self.post_message(JobFinished(event))
        except RuntimeError:
            delivered = False
        if not delivered:
            logger.info("dropped completion after shutdown: %s", type(event).__name__)

    @on(JobFinished)
    def handle_job_finished(self, message: JobFinished) -> None:
        self.apply_event(message.event)

    # ──────────── Terminal input ────────────

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.apply_event(KeyInput(event.key, event.character))

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        self.apply_event(ScrollInput(1))

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        self.apply_event(ScrollInput(-1))

    def on_resize(self, event: events.Resize) -> None:
        self.apply_event(Resize(event.size.width, event.size.height))
