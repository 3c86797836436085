"""Directory listing value types."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Entry:
    """One filesystem item as it looked when the directory was listed."""

    name: str
    is_dir: bool
    size: int = 0
    mode: str = "----------"
    modified: float = 0.0
    is_symlink: bool = False

    @property
    def is_hidden(self) -> bool:
        return self.name.startswith(".")

    @property
    def suffix(self) -> str:
        return Path(self.name).suffix.lower()


@dataclass(frozen=True)
class Listing:
    """Ordered entries of a single directory."""

    path: Path
    entries: tuple[Entry, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> Entry:
        return self.entries[index]

    def __iter__(self):
        return iter(self.entries)

    def entry_path(self, index: int) -> Path:
        return self.path / self.entries[index].name
