"""Search scope computation."""

from __future__ import annotations

import logging

from .document import SearchContext
from .exceptions import InvalidScope
from .types import Direction, ScopeMode, SearchBounds

logger = logging.getLogger(__name__)


class ScopeResolver:
    """Computes the range a search may match in.

    Three independent modes exist: the primary `scope`, the `repeat_scope`
    used by repeat commands (falls back to `scope`), and the optional
    `spillover_scope` used for counts above one and for retries.
    """

    def __init__(
        self,
        scope: ScopeMode = ScopeMode.LINE,
        repeat_scope: ScopeMode | None = None,
        spillover_scope: ScopeMode | None = None,
    ):
        self.scope = scope
        self.repeat_scope = repeat_scope
        self.spillover_scope = spillover_scope

    def mode_for(self, count_magnitude: int = 1, *, repeat: bool = False) -> ScopeMode:
        """Scope mode used for a search with the given count."""
        if count_magnitude > 1 and self.spillover_scope is not None:
            return self.spillover_scope
        if repeat and self.repeat_scope is not None:
            return self.repeat_scope
        return self.scope

    def bounds(
        self,
        context: SearchContext,
        direction: Direction,
        count_magnitude: int = 1,
        *,
        override: ScopeMode | None = None,
        repeat: bool = False,
    ) -> SearchBounds:
        mode = override or self.mode_for(count_magnitude, repeat=repeat)
        return compute_bounds(context, direction, mode)


def compute_bounds(context: SearchContext, direction: Direction, mode: ScopeMode) -> SearchBounds:
    """Bounds for `mode` around the context cursor."""
    doc = context.document
    cursor = doc.clamp(context.cursor)
    forward = direction is Direction.FORWARD

    if mode is ScopeMode.LINE:
        start, end = (cursor + 1, doc.line_end(cursor)) if forward else (doc.line_start(cursor), cursor)
    elif mode is ScopeMode.VISIBLE:
        viewport = context.viewport
        start, end = (cursor + 1, viewport.end - 1) if forward else (viewport.start, cursor)
    elif mode is ScopeMode.BUFFER:
        start, end = (cursor + 1, doc.end) if forward else (doc.start, cursor)
    elif mode is ScopeMode.WHOLE_LINE:
        start, end = doc.line_start(cursor), doc.line_end(cursor)
    elif mode is ScopeMode.WHOLE_VISIBLE:
        start, end = context.viewport.start, context.viewport.end - 1
    elif mode is ScopeMode.WHOLE_BUFFER:
        start, end = doc.start, doc.end
    else:
        raise InvalidScope(mode)

    bounds = SearchBounds.clamped(doc.clamp(start), doc.clamp(end))
    logger.debug("bounds %s %s at %d -> %s", mode.value, direction.name, cursor, bounds)
    return bounds
