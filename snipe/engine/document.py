"""Offset-based document queries used by scope computation and search."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, replace

from .types import ModalState, Position

_BLANK = " \t"


@dataclass(frozen=True)
class Viewport:
    """Visible window as character offsets.

    `end` is one past the end of the last visible line, so `end - 1` is
    the last offset a visible-scope search may reach.
    """

    start: int
    end: int


class Document:
    """Read-only view of editor text addressed by character offsets."""

    def __init__(self, text: str):
        self.text = text
        self._line_starts = [0]
        for index, ch in enumerate(text):
            if ch == "\n":
                self._line_starts.append(index + 1)

    @property
    def start(self) -> int:
        return 0

    @property
    def end(self) -> int:
        return len(self.text)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def clamp(self, offset: int) -> int:
        return max(0, min(offset, self.end))

    def row_of(self, offset: int) -> int:
        """Row containing `offset`."""
        return bisect_right(self._line_starts, self.clamp(offset)) - 1

    def row_start(self, row: int) -> int:
        row = max(0, min(row, self.line_count - 1))
        return self._line_starts[row]

    def row_end(self, row: int) -> int:
        """Offset of the newline ending `row` (or the document end)."""
        row = max(0, min(row, self.line_count - 1))
        if row + 1 < self.line_count:
            return self._line_starts[row + 1] - 1
        return self.end

    def line_start(self, offset: int) -> int:
        return self.row_start(self.row_of(offset))

    def line_end(self, offset: int) -> int:
        return self.row_end(self.row_of(offset))

    def indentation(self, offset: int) -> int:
        """Offset of the first non-blank character on the line of `offset`.

        A line made only of blanks reports its end.
        """
        pos = self.line_start(offset)
        end = self.line_end(offset)
        while pos < end and self.text[pos] in _BLANK:
            pos += 1
        return pos

    def blank_run(self, offset: int) -> int:
        """Number of consecutive spaces/tabs starting at `offset`."""
        pos = offset
        while pos < self.end and self.text[pos] in _BLANK:
            pos += 1
        return max(0, pos - offset)

    def location(self, offset: int) -> Position:
        """Convert an offset into a (row, col) position."""
        offset = self.clamp(offset)
        row = self.row_of(offset)
        return Position(row, offset - self._line_starts[row])

    def offset(self, row: int, col: int) -> int:
        """Convert a (row, col) position into an offset, clamping both."""
        row = max(0, min(row, self.line_count - 1))
        start = self._line_starts[row]
        col = max(0, min(col, self.row_end(row) - start))
        return start + col

    def viewport(self, first_row: int, last_row: int) -> Viewport:
        """Viewport covering rows `first_row`..`last_row` inclusive."""
        first_row = max(0, min(first_row, self.line_count - 1))
        last_row = max(first_row, min(last_row, self.line_count - 1))
        return Viewport(self.row_start(first_row), self.row_end(last_row) + 1)

    def full_viewport(self) -> Viewport:
        return self.viewport(0, self.line_count - 1)


@dataclass(frozen=True)
class SearchContext:
    """Host state a search runs against."""

    document: Document
    cursor: int
    viewport: Viewport
    modal_state: ModalState = ModalState.NORMAL

    @classmethod
    def for_text(
        cls,
        text: str,
        cursor: int = 0,
        *,
        viewport: Viewport | None = None,
        modal_state: ModalState = ModalState.NORMAL,
    ) -> SearchContext:
        document = Document(text)
        return cls(document, cursor, viewport or document.full_viewport(), modal_state)

    def moved(self, cursor: int) -> SearchContext:
        return replace(self, cursor=cursor)
