"""Events consumed by the controller, one at a time."""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .entries import Listing
from .errors import Failure
from .jobs import Job


@dataclass(frozen=True)
class KeyInput:
    key: str
    character: str | None = None


@dataclass(frozen=True)
class ScrollInput:
    """Mouse wheel; negative ``delta`` scrolls up."""

    delta: int


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Preview:
    """Preview pane content: file text, or a directory's entries in ``listing``."""

    path: Path
    text: str = ""
    truncated: bool = False
    binary: bool = False
    listing: Listing | None = None


# Completion events: exactly one per dispatched job.


@dataclass(frozen=True)
class ListingReady:
    job: Job
    listing: Listing


@dataclass(frozen=True)
class CommandFailed:
    job: Job
    failure: Failure


@dataclass(frozen=True)
class PreviewReady:
    job: Job
    preview: Preview


InputEvent = Union[KeyInput, ScrollInput, Resize]
CompletionEvent = Union[ListingReady, CommandFailed, PreviewReady]
Event = Union[InputEvent, CompletionEvent]
