"""Failure taxonomy shared by the file store, dispatcher and status line."""

import errno
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class FailureKind(Enum):
    NOT_FOUND = "NotFound"
    PERMISSION_DENIED = "PermissionDenied"
    ALREADY_EXISTS = "AlreadyExists"
    IO_FAILURE = "IOFailure"
    INVALID_INPUT = "InvalidInput"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    path: Path | None = None
    message: str = ""

    def describe(self) -> str:
        text = str(self.kind)
        if self.path is not None:
            text += f": {self.path}"
        if self.message:
            text += f" ({self.message})"
        return text


class FileStoreError(Exception):
    """Raised by every file store operation that cannot complete."""

    def __init__(self, kind: FailureKind, path: Path | None = None, message: str = ""):
        super().__init__(f"{kind}: {path}" + (f" ({message})" if message else ""))
        self.kind = kind
        self.path = path
        self.message = message

    @property
    def failure(self) -> Failure:
        return Failure(self.kind, self.path, self.message)

    @classmethod
    def from_os_error(cls, exc: OSError, path: Path | None = None) -> "FileStoreError":
        if path is None and exc.filename:
            path = Path(exc.filename)
        message = exc.strerror or str(exc)
        if isinstance(exc, FileNotFoundError):
            kind = FailureKind.NOT_FOUND
        elif isinstance(exc, PermissionError):
            kind = FailureKind.PERMISSION_DENIED
        elif isinstance(exc, FileExistsError) or exc.errno == errno.ENOTEMPTY:
            kind = FailureKind.ALREADY_EXISTS
        else:
            kind = FailureKind.IO_FAILURE
        return cls(kind, path, message)
