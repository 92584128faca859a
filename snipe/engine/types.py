"""Core types for the snipe engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import InvalidScope


class Direction(Enum):
    """Search direction; the value is the sign applied to counts."""

    FORWARD = 1
    BACKWARD = -1

    @classmethod
    def of(cls, count: int) -> Direction:
        """Direction implied by the sign of a count."""
        return cls.BACKWARD if count < 0 else cls.FORWARD


class ModalState(Enum):
    """Host editor state that decides cursor placement after a match."""

    NORMAL = "normal"
    OPERATOR = "operator"
    VISUAL = "visual"


class ScopeMode(Enum):
    """Document range eligible for matching."""

    LINE = "line"
    BUFFER = "buffer"
    VISIBLE = "visible"
    WHOLE_LINE = "whole-line"
    WHOLE_BUFFER = "whole-buffer"
    WHOLE_VISIBLE = "whole-visible"

    @classmethod
    def parse(cls, value: object, setting: str = "scope") -> ScopeMode:
        """Parse a setting value, accepting `whole_line` as well as `whole-line`."""
        if isinstance(value, ScopeMode):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "-")
            for mode in cls:
                if mode.value == normalized:
                    return mode
        raise InvalidScope(value, setting)

    @classmethod
    def parse_optional(cls, value: object, setting: str) -> ScopeMode | None:
        if value is None or value == "" or value is False:
            return None
        return cls.parse(value, setting)


@dataclass(frozen=True)
class Span:
    """Half-open character range [start, end)."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, other: Span) -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class SearchBounds:
    """Range eligible for matching; start never exceeds end."""

    start: int
    end: int

    @classmethod
    def clamped(cls, start: int, end: int) -> SearchBounds:
        """Build bounds, collapsing an inverted range to an empty one at `end`."""
        if start > end:
            return cls(end, end)
        return cls(start, end)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class Position:
    """A (row, col) location in a document."""

    row: int
    col: int


@dataclass(frozen=True)
class KeyPattern:
    """A typed key and the regex fragment it matches."""

    literal: str
    pattern: str


@dataclass(frozen=True)
class SnipeRequest:
    """Parameters of a single motion invocation."""

    key_count: int
    direction: Direction
    count: int = 1
    consume_match: bool = True

    def __post_init__(self) -> None:
        if self.key_count < 1:
            raise ValueError("key_count must be at least 1")

    @property
    def signed_count(self) -> int:
        """Count carrying direction: the direction flips a negative count."""
        return self.direction.value * (self.count or 1)


@dataclass(frozen=True)
class LastSnipe:
    """Record of the most recent non-repeat snipe."""

    count: int
    keys: tuple[str, ...]
    consume_match: bool
    key_count: int
    transient_keys: tuple[str, ...] = ()


@dataclass(frozen=True)
class SearchResult:
    """Outcome of a successful search."""

    position: int
    match: Span
    scope: ScopeMode
    direction: Direction
    spilled: bool = False
