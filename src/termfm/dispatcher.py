"""
Command dispatcher.

Starts filesystem jobs off the event loop and turns each outcome into a
single completion event. ``submit`` decides where the work runs (a daemon
thread in the app, inline in tests) and ``deliver`` puts the
completion event back on the controller's event stream.
"""

import logging
from functools import partial
from pathlib import Path
from typing import Callable

from .errors import FailureKind, FileStoreError
from .events import CommandFailed, CompletionEvent, ListingReady, Preview, PreviewReady
from .filestore import FileStore
from .jobs import (
    DeleteEntry,
    Job,
    ListDirectory,
    MoveEntry,
    PreviewDirectory,
    ReadFile,
    RenameEntry,
    describe,
    is_mutating,
)

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_LIMIT = 64 * 1024


def decode_preview(path: Path, data: bytes, limit: int) -> Preview:
    truncated = len(data) > limit
    data = data[:limit]
    if b"\x00" in data:
        return Preview(path, "", truncated=truncated, binary=True)
    return Preview(path, data.decode("utf-8", errors="replace"), truncated=truncated)


class CommandDispatcher:
    def __init__(
        self,
        store: FileStore,
        submit: Callable[[Callable[[], None]], object],
        deliver: Callable[[CompletionEvent], object],
        preview_limit: int = DEFAULT_PREVIEW_LIMIT,
    ):
        self.store = store
        self._submit = submit
        self._deliver = deliver
        self.preview_limit = preview_limit

    # ──────────── Issuing ────────────

    def dispatch(self, job: Job) -> None:
        logger.debug("dispatch: %s", describe(job))
        self._submit(partial(self._run, job))

    def list(self, path: Path) -> None:
        self.dispatch(ListDirectory(path))

    def rename(self, path: Path, new_name: str) -> None:
        self.dispatch(RenameEntry(path, new_name))

    def move(self, path: Path, destination: str) -> None:
        self.dispatch(MoveEntry(path, destination))

    def delete(self, path: Path) -> None:
        self.dispatch(DeleteEntry(path))

    def read(self, path: Path) -> None:
        self.dispatch(ReadFile(path))

    def preview_directory(self, path: Path) -> None:
        self.dispatch(PreviewDirectory(path))

    # ──────────── Running ────────────

    def _run(self, job: Job) -> None:
        self._deliver(self.execute(job))

    def execute(self, job: Job) -> CompletionEvent:
        """Run ``job`` to completion on the calling thread."""
        try:
            return self._execute(job)
        except FileStoreError as exc:
            logger.warning("%s failed: %s", describe(job), exc)
            return CommandFailed(job, exc.failure)
        except OSError as exc:
            logger.warning("%s failed: %s", describe(job), exc)
            return CommandFailed(job, FileStoreError.from_os_error(exc, getattr(job, "path", None)).failure)

    def _execute(self, job: Job) -> CompletionEvent:
        store = self.store
        if isinstance(job, ListDirectory):
            return ListingReady(job, store.list_directory(job.path))
        if isinstance(job, ReadFile):
            data = store.read_file(job.path, self.preview_limit)
            return PreviewReady(job, decode_preview(job.path, data, self.preview_limit))
        if isinstance(job, PreviewDirectory):
            return PreviewReady(job, Preview(job.path, listing=store.list_directory(job.path)))
        if not is_mutating(job):
            raise FileStoreError(FailureKind.INVALID_INPUT, None, f"unknown job {job!r}")

        if isinstance(job, RenameEntry):
            store.rename(job.path, job.new_name)
        elif isinstance(job, MoveEntry):
            store.move_or_copy(job.path, job.destination, delete_source=True)
        else:
            store.delete(job.path)
        # Mutations re-list the directory the entry lived in.
        return ListingReady(job, store.list_directory(job.path.parent))
