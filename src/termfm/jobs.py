"""Descriptions of the filesystem commands the dispatcher can run."""

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class ListDirectory:
    path: Path


@dataclass(frozen=True)
class RenameEntry:
    path: Path
    new_name: str


@dataclass(frozen=True)
class MoveEntry:
    path: Path
    destination: str


@dataclass(frozen=True)
class DeleteEntry:
    path: Path


@dataclass(frozen=True)
class ReadFile:
    path: Path


@dataclass(frozen=True)
class PreviewDirectory:
    """List a directory for the preview pane without entering it."""

    path: Path


Job = Union[ListDirectory, RenameEntry, MoveEntry, DeleteEntry, ReadFile, PreviewDirectory]

MUTATING_JOBS = (RenameEntry, MoveEntry, DeleteEntry)


def is_mutating(job: Job) -> bool:
    return isinstance(job, MUTATING_JOBS)


def describe(job: Job) -> str:
    if isinstance(job, ListDirectory):
        return f"list {job.path}"
    if isinstance(job, RenameEntry):
        return f"rename {job.path} -> {job.new_name}"
    if isinstance(job, MoveEntry):
        return f"move {job.path} -> {job.destination}"
    if isinstance(job, DeleteEntry):
        return f"delete {job.path}"
    if isinstance(job, PreviewDirectory):
        return f"preview {job.path}"
    return f"read {job.path}"
