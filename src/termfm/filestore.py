"""
Filesystem access for termfm.

Every operation either returns its result or raises FileStoreError; callers
never see a bare OSError. The store is synchronous and blocking, so the
dispatcher only ever calls it from a worker thread.
"""

import logging
import os
import shutil
import stat
from pathlib import Path

from .entries import Entry, Listing
from .errors import FailureKind, FileStoreError

logger = logging.getLogger(__name__)


def _absolute(path: Path | str) -> Path:
    return Path(os.path.abspath(Path(path).expanduser()))


def _entry_for(child: Path) -> Entry | None:
    try:
        lst = child.lstat()
    except OSError:
        # Vanished between iterdir() and stat().
        return None
    try:
        st = child.stat()
    except OSError:
        st = lst
    is_dir = stat.S_ISDIR(st.st_mode)
    return Entry(
        name=child.name,
        is_dir=is_dir,
        size=0 if is_dir else st.st_size,
        mode=stat.filemode(lst.st_mode),
        modified=st.st_mtime,
        is_symlink=stat.S_ISLNK(lst.st_mode),
    )


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


class FileStore:
    """Directory listing and mutating file operations."""

    def __init__(self, show_hidden: bool = False):
        self.show_hidden = show_hidden

    def list_directory(self, path: Path | str) -> Listing:
        directory = _absolute(path)
        try:
            children = list(directory.iterdir())
        except OSError as exc:
            raise FileStoreError.from_os_error(exc, directory) from exc

        entries = []
        for child in children:
            entry = _entry_for(child)
            if entry is None or (entry.is_hidden and not self.show_hidden):
                continue
            entries.append(entry)
        entries.sort(key=lambda e: (not e.is_dir, e.name.lower()))
        logger.debug("listed %s (%d entries)", directory, len(entries))
        return Listing(directory, tuple(entries))

    def rename(self, path: Path, new_name: str) -> Path:
        if not new_name or new_name in (".", ".."):
            raise FileStoreError(FailureKind.INVALID_INPUT, path, "empty name")
        if os.sep in new_name or (os.altsep and os.altsep in new_name):
            raise FileStoreError(FailureKind.INVALID_INPUT, path, "name must not contain a path separator")
        target = path.parent / new_name
        if target == path:
            raise FileStoreError(FailureKind.INVALID_INPUT, path, "name unchanged")
        if os.path.lexists(target):
            raise FileStoreError(FailureKind.ALREADY_EXISTS, target)
        try:
            path.rename(target)
        except OSError as exc:
            raise FileStoreError.from_os_error(exc, path) from exc
        logger.info("renamed %s -> %s", path, target)
        return target

    def resolve_destination(self, path: Path, destination: str) -> Path:
        """Turn user input into the final target path for ``path``."""
        if not destination.strip():
            raise FileStoreError(FailureKind.INVALID_INPUT, path, "empty destination")
        target = Path(destination.strip()).expanduser()
        if not target.is_absolute():
            target = path.parent / target
        target = _absolute(target)
        if target.is_dir():
            target = target / path.name
        return target

    def move_or_copy(self, path: Path, destination: str, delete_source: bool = True) -> Path:
        if not os.path.lexists(path):
            raise FileStoreError(FailureKind.NOT_FOUND, path)
        target = self.resolve_destination(path, destination)
        if target == path:
            raise FileStoreError(FailureKind.INVALID_INPUT, path, "source and destination are the same")
        if os.path.lexists(target):
            raise FileStoreError(FailureKind.ALREADY_EXISTS, target)
        if _is_real_dir(path) and target.resolve().is_relative_to(path.resolve()):
            raise FileStoreError(FailureKind.INVALID_INPUT, target, "cannot move a directory into itself")

        copying_tree = _is_real_dir(path)
        try:
            if copying_tree:
                shutil.copytree(path, target, symlinks=True)
            else:
                shutil.copy2(path, target, follow_symlinks=False)
        except OSError as exc:
            # target did not exist before; leave no partial copy behind.
            if copying_tree:
                shutil.rmtree(target, ignore_errors=True)
            else:
                target.unlink(missing_ok=True)
            logger.warning("copy %s -> %s failed, removed partial target", path, target)
            raise FileStoreError.from_os_error(exc, path) from exc
        logger.info("copied %s -> %s", path, target)

        if delete_source:
            self.delete(path)
        return target

    def delete(self, path: Path) -> None:
        if not os.path.lexists(path):
            raise FileStoreError(FailureKind.NOT_FOUND, path)
        try:
            if _is_real_dir(path):
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as exc:
            raise FileStoreError.from_os_error(exc, path) from exc
        logger.info("deleted %s", path)

    def read_file(self, path: Path, limit: int = 65536) -> bytes:
        """Read at most ``limit`` bytes plus one, so callers can detect truncation."""
        try:
            with path.open("rb") as fh:
                return fh.read(limit + 1)
        except OSError as exc:
            raise FileStoreError.from_os_error(exc, path) from exc
