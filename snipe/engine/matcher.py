"""Pattern compilation and bounded directional matching."""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence

from .exceptions import EmptyKeys
from .types import KeyPattern, SearchBounds, Span


def literal_text(patterns: Sequence[KeyPattern]) -> str:
    return "".join(p.literal for p in patterns)


def effective_pattern(patterns: Sequence[KeyPattern]) -> str:
    """Concatenation of every pattern fragment."""
    return "".join(p.pattern for p in patterns)


def is_case_sensitive(patterns: Sequence[KeyPattern], smart_case: bool) -> bool:
    """Smart case ignores case unless the typed keys contain an uppercase letter."""
    if not smart_case:
        return True
    return any(ch.isupper() for ch in literal_text(patterns))


def compile_patterns(patterns: Sequence[KeyPattern], smart_case: bool = True) -> re.Pattern[str]:
    if not patterns:
        raise EmptyKeys()
    flags = 0 if is_case_sensitive(patterns, smart_case) else re.IGNORECASE
    return re.compile(effective_pattern(patterns), flags)


def iter_matches(regex: re.Pattern[str], text: str, bounds: SearchBounds) -> Iterator[Span]:
    """Non-overlapping, non-empty matches lying entirely inside `bounds`."""
    for match in regex.finditer(text, bounds.start, bounds.end):
        if match.end() > match.start():
            yield Span(match.start(), match.end())


def find_forward(
    regex: re.Pattern[str], text: str, origin: int, bounds: SearchBounds, count: int = 1
) -> Span | None:
    """The `count`-th match starting at or after `origin` and ending inside `bounds`.

    Successive occurrences may overlap: each one starts one position after
    the previous match start, the same origin a repeated search would use.
    """
    pos = max(origin, bounds.start)
    found = None
    remaining = max(1, count)
    while remaining:
        if pos > bounds.end:
            return None
        match = regex.search(text, pos, bounds.end)
        if match is None:
            return None
        pos = match.start() + 1
        if match.end() == match.start():
            continue
        found = Span(match.start(), match.end())
        remaining -= 1
    return found


def find_backward(
    regex: re.Pattern[str], text: str, limit: int, bounds: SearchBounds, count: int = 1
) -> Span | None:
    """The `count`-th match ending at or before `limit`, searching backwards.

    Each further occurrence must end at or before the previous match start.
    """
    limit = min(limit, bounds.end)
    found = None
    for _ in range(max(1, count)):
        found = _last_match_before(regex, text, bounds.start, limit)
        if found is None:
            return None
        limit = found.start
    return found


def _last_match_before(regex: re.Pattern[str], text: str, lower: int, limit: int) -> Span | None:
    for start in range(limit - 1, lower - 1, -1):
        match = regex.match(text, start, limit)
        if match is not None and match.end() > match.start():
            return Span(match.start(), match.end())
    return None
