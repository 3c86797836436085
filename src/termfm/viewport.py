"""Scrollable window over the rows of a listing."""

from dataclasses import dataclass, replace


def clamp_cursor(cursor: int, length: int) -> int:
    """Wrap ``cursor`` into ``[0, length - 1]``; moving past either end lands on the other."""
    if length <= 0:
        return 0
    if cursor < 0:
        return length - 1
    if cursor > length - 1:
        return 0
    return cursor


@dataclass(frozen=True)
class Viewport:
    offset: int = 0
    height: int = 1
    width: int = 80

    @property
    def bottom(self) -> int:
        return self.offset + self.height - 1

    def contains(self, row: int) -> bool:
        return self.offset <= row <= self.bottom

    def scroll_to_show(self, cursor: int) -> "Viewport":
        # A single step past an edge scrolls by one row; a wrap lands the
        # cursor on the nearest edge.
        if cursor < self.offset:
            return replace(self, offset=max(0, cursor))
        if cursor > self.bottom:
            return replace(self, offset=cursor - self.height + 1)
        return self

    def recenter(self) -> "Viewport":
        return replace(self, offset=0)

    def resize(self, width: int, height: int, cursor: int = 0) -> "Viewport":
        resized = replace(self, width=max(1, width), height=max(1, height))
        return resized.scroll_to_show(cursor)

    def visible(self, length: int) -> range:
        return range(min(self.offset, length), min(self.offset + self.height, length))
