"""Highlight lifecycle for snipe matches."""

from __future__ import annotations

import logging
import re
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Protocol

from .matcher import iter_matches
from .types import SearchBounds, Span

logger = logging.getLogger(__name__)

HIGHLIGHT_CATEGORY = "snipe"
PRIMARY = "primary"
SECONDARY = "secondary"


class HighlightSink(Protocol):
    """Host primitive that draws highlight regions."""

    def add_highlight(self, span: Span, kind: str, category: str) -> Hashable:
        """Draw a region and return a handle for removing it."""
        ...

    def remove_highlight(self, handle: Hashable) -> None:
        ...


@dataclass
class HighlightRegion:
    handle: Hashable
    span: Span
    kind: str


class CleanupToken:
    """One-shot registration to clear highlights on the next user action."""

    def __init__(self, manager: HighlightManager):
        self._manager: HighlightManager | None = manager

    @property
    def pending(self) -> bool:
        return self._manager is not None

    def fire(self) -> None:
        manager, self._manager = self._manager, None
        if manager is not None:
            manager.clear_all()

    def invalidate(self) -> None:
        self._manager = None


class HighlightManager:
    """Owns every snipe highlight region drawn in a host."""

    def __init__(self, sink: HighlightSink, category: str = HIGHLIGHT_CATEGORY):
        self._sink = sink
        self.category = category
        self._regions: list[HighlightRegion] = []
        self._cleanup: CleanupToken | None = None

    @property
    def regions(self) -> list[HighlightRegion]:
        return list(self._regions)

    def spans(self, kind: str | None = None) -> list[Span]:
        return [r.span for r in self._regions if kind is None or r.kind == kind]

    def highlight_first(self, span: Span) -> None:
        """Mark `span` as the primary match, replacing regions it overlaps."""
        keep = []
        for region in self._regions:
            if region.span.overlaps(span):
                self._sink.remove_highlight(region.handle)
            else:
                keep.append(region)
        self._regions = keep
        self._add(span, PRIMARY)

    def highlight_all(self, regex: re.Pattern[str], text: str, bounds: SearchBounds) -> list[Span]:
        """Mark every match of `regex` inside `bounds` as secondary."""
        spans = list(iter_matches(regex, text, bounds))
        for span in spans:
            self._add(span, SECONDARY)
        return spans

    def clear_all(self) -> None:
        """Remove every region; safe when nothing is highlighted."""
        if self._cleanup is not None:
            self._cleanup.invalidate()
            self._cleanup = None
        regions, self._regions = self._regions, []
        for region in regions:
            self._sink.remove_highlight(region.handle)

    def schedule_cleanup(self) -> CleanupToken:
        """Arrange for the current highlights to go away on the next user action."""
        if self._cleanup is not None:
            self._cleanup.invalidate()
        self._cleanup = CleanupToken(self)
        return self._cleanup

    def on_user_action(self) -> None:
        """Fire the pending cleanup, if any."""
        token, self._cleanup = self._cleanup, None
        if token is not None and token.pending:
            logger.debug("clearing %d snipe highlights", len(self._regions))
            token.fire()

    def _add(self, span: Span, kind: str) -> None:
        handle = self._sink.add_highlight(span, kind, self.category)
        self._regions.append(HighlightRegion(handle, span, kind))
