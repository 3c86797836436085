"""
The controller: one immutable Model per processed event.

``Controller.apply(event, model)`` is the only way the browser state
changes. It returns the next model together with the jobs that have to be
started as a consequence. At most one job is in flight (``Model.pending``);
anything requested meanwhile waits in ``Model.queued`` and is started, in
order, when the in-flight job's completion event is applied.
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from .entries import Entry, Listing
from .errors import Failure
from .events import (
    CommandFailed,
    Event,
    KeyInput,
    ListingReady,
    Preview,
    PreviewReady,
    Resize,
    ScrollInput,
)
from .jobs import (
    DeleteEntry,
    Job,
    ListDirectory,
    MoveEntry,
    PreviewDirectory,
    ReadFile,
    RenameEntry,
    describe,
)
from .modes import KeyMap, Mode, ModeMachine, PromptAction
from .viewport import Viewport, clamp_cursor

logger = logging.getLogger(__name__)

# Rows taken by everything that is not the listing pane: header, path bar,
# pane borders and the status line.
CHROME_ROWS = 5


@dataclass(frozen=True)
class Model:
    listing: Listing
    cursor: int = 0
    viewport: Viewport = Viewport()
    mode: Mode = Mode.BROWSE
    input_buffer: str = ""
    failure: Failure | None = None
    pending: Job | None = None
    queued: tuple[Job, ...] = ()
    preview: Preview | None = None
    notice: str = ""
    quitting: bool = False

    @property
    def selected(self) -> Entry | None:
        if not self.listing.entries:
            return None
        return self.listing[self.cursor]

    @property
    def selected_path(self) -> Path | None:
        if not self.listing.entries:
            return None
        return self.listing.entry_path(self.cursor)

    @property
    def busy(self) -> bool:
        return self.pending is not None


Transition = tuple[Model, list[Job]]


class Controller:
    def __init__(self, keymap: KeyMap | None = None, mouse_wheel: bool = True):
        self.modes = ModeMachine(keymap)
        self.keys = self.modes.keymap
        self.mouse_wheel = mouse_wheel

    def apply(self, event: Event, model: Model) -> Transition:
        if isinstance(event, KeyInput):
            return self._on_key(event, model)
        if isinstance(event, ScrollInput):
            return self._on_scroll(event, model), []
        if isinstance(event, Resize):
            return self._on_resize(event, model), []
        if isinstance(event, ListingReady):
            return self._complete(self._on_listing(event, model), event.job)
        if isinstance(event, CommandFailed):
            return self._complete(self._on_failure(event, model), event.job)
        if isinstance(event, PreviewReady):
            return self._complete(self._on_preview(event, model), event.job)
        raise TypeError(f"unsupported event: {event!r}")

    # ──────────── Job scheduling ────────────

    def _issue(self, model: Model, job: Job) -> Transition:
        if model.pending is None:
            return replace(model, pending=job), [job]
        logger.debug("queued behind %s: %s", describe(model.pending), describe(job))
        return replace(model, queued=model.queued + (job,), notice="Busy, queued: " + describe(job)), []

    def _complete(self, model: Model, job: Job) -> Transition:
        if model.pending != job:
            logger.warning("completion for %s while %s was pending", describe(job), model.pending)
        if not model.queued:
            return replace(model, pending=None), []
        following, rest = model.queued[0], model.queued[1:]
        return replace(model, pending=following, queued=rest), [following]

    # ──────────── Input ────────────

    def _on_key(self, event: KeyInput, model: Model) -> Transition:
        key = event.key
        if key in self.keys.quit:
            return self._quit(model), []

        model = replace(model, failure=None, notice="")

        if model.mode is Mode.HELP:
            return self._set_mode(model, Mode.BROWSE), []
        if model.mode.is_prompt:
            return self._on_prompt_key(event, model)
        return self._on_browse_key(event, model)

    def _on_prompt_key(self, event: KeyInput, model: Model) -> Transition:
        action = self.modes.prompt_action(event.key)
        if action is PromptAction.CANCEL:
            return self._set_mode(model, Mode.BROWSE), []
        if action is PromptAction.COMMIT:
            return self._commit(model)
        buffer = self.modes.edit(model.input_buffer, event.key, event.character)
        return replace(model, input_buffer=buffer), []

    def _commit(self, model: Model) -> Transition:
        mode, value, target = model.mode, model.input_buffer, model.selected_path
        model = self._set_mode(model, Mode.BROWSE)
        if target is None:
            return model, []
        if mode is Mode.RENAME_PROMPT:
            return self._issue(model, RenameEntry(target, value.strip()))
        if mode is Mode.MOVE_PROMPT:
            return self._issue(model, MoveEntry(target, value.strip()))
        if value == "y":
            return self._issue(model, DeleteEntry(target))
        # Anything but "y" cancels; refresh without touching the filesystem.
        return self._issue(model, ListDirectory(model.listing.path))

    def _on_browse_key(self, event: KeyInput, model: Model) -> Transition:
        key, keys = event.key, self.keys
        if key in keys.browse_quit:
            return self._quit(model), []
        if key in keys.up:
            return self._move_cursor(model, -1), []
        if key in keys.down:
            return self._move_cursor(model, 1), []
        if key in keys.select:
            return self._select(model)
        if key in keys.parent:
            parent = model.listing.path.parent
            if parent == model.listing.path:
                return model, []
            return self._issue(model, ListDirectory(parent))
        if key in keys.refresh:
            return self._issue(model, ListDirectory(model.listing.path))
        if key in keys.preview:
            return self._preview(model)

        target = self.modes.browse_transition(key, model.selected is not None)
        if target is not None:
            return self._set_mode(model, target), []
        return model, []

    def _select(self, model: Model) -> Transition:
        entry = model.selected
        if entry is None:
            return model, []
        path = model.selected_path
        if entry.is_dir:
            return self._issue(model, ListDirectory(path))
        return self._issue(model, ReadFile(path))

    def _preview(self, model: Model) -> Transition:
        entry = model.selected
        if entry is None:
            return model, []
        path = model.selected_path
        if entry.is_dir:
            return self._issue(model, PreviewDirectory(path))
        return self._issue(model, ReadFile(path))

    def _on_scroll(self, event: ScrollInput, model: Model) -> Model:
        if not self.mouse_wheel or model.mode is not Mode.BROWSE or event.delta == 0:
            return model
        return self._move_cursor(model, 1 if event.delta > 0 else -1)

    def _on_resize(self, event: Resize, model: Model) -> Model:
        viewport = model.viewport.resize(event.width, event.height - CHROME_ROWS, model.cursor)
        return replace(model, viewport=viewport)

    # ──────────── Completions ────────────

    def _on_listing(self, event: ListingReady, model: Model) -> Model:
        job = event.job
        notice = ""
        if isinstance(job, RenameEntry):
            notice = f"✔  Renamed to: {job.new_name}"
        elif isinstance(job, MoveEntry):
            notice = f"✔  Moved: {job.path.name}"
        elif isinstance(job, DeleteEntry):
            notice = f"✔  Deleted: {job.path.name}"
        model = replace(
            model,
            listing=event.listing,
            cursor=0,
            viewport=model.viewport.recenter(),
            preview=None,
            failure=None,
            notice=notice,
        )
        if model.mode.is_prompt:
            model = self._set_mode(model, Mode.BROWSE)
        return model

    def _on_preview(self, event: PreviewReady, model: Model) -> Model:
        # The cursor may have moved on while the read was in flight.
        if event.preview.path != model.selected_path:
            logger.debug("discarding stale preview of %s", event.preview.path)
            return model
        return replace(model, preview=event.preview)

    def _on_failure(self, event: CommandFailed, model: Model) -> Model:
        logger.info("command failed: %s", event.failure.describe())
        model = replace(model, failure=event.failure, notice="")
        if model.mode.is_prompt:
            model = self._set_mode(model, Mode.BROWSE)
        cursor = clamp_cursor(model.cursor, len(model.listing))
        return replace(model, cursor=cursor, viewport=model.viewport.scroll_to_show(cursor))

    # ──────────── Helpers ────────────

    def _move_cursor(self, model: Model, step: int) -> Model:
        if not model.listing.entries:
            return model
        cursor = clamp_cursor(model.cursor + step, len(model.listing))
        return replace(model, cursor=cursor, viewport=model.viewport.scroll_to_show(cursor), preview=None)

    def _set_mode(self, model: Model, mode: Mode) -> Model:
        if mode is not model.mode:
            logger.debug("mode %s -> %s", model.mode.value, mode.value)
        return replace(model, mode=mode, input_buffer="")

    def _quit(self, model: Model) -> Model:
        if model.pending is not None:
            logger.info("quitting with %d job(s) abandoned", 1 + len(model.queued))
        return replace(model, quitting=True)
