"""Directional multi-character snipe search."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .document import Document, SearchContext
from .exceptions import EmptyKeys, NotFound
from .matcher import compile_patterns, find_backward, find_forward, literal_text
from .scope import ScopeResolver, compute_bounds
from .types import Direction, KeyPattern, ModalState, ScopeMode, SearchResult, Span

logger = logging.getLogger(__name__)


def _is_blank(text: str) -> bool:
    return bool(text) and all(ch in " \t" for ch in text)


def place_cursor(span: Span, direction: Direction, consume_match: bool, modal_state: ModalState) -> int:
    """Cursor offset for a match, following the motion placement rules.

    Forward searches:

    - visual: on the last matched character when inclusive, else on the
      match start;
    - operator-pending: the match end when inclusive (the operator range is
      end-exclusive), else the match start;
    - plain motion: the match start when inclusive; when exclusive, back by
      the match length and, for matches longer than one character, forward
      one again. That lands just before one- and two-character matches.

    Backward searches mirror this: inclusive placements sit on the match
    start, exclusive ones just past the match.
    """
    if direction is Direction.FORWARD:
        if modal_state is ModalState.VISUAL:
            return span.end - 1 if consume_match else span.start
        if modal_state is ModalState.OPERATOR:
            return span.end if consume_match else span.start
        if consume_match:
            return span.start
        pos = span.start - span.length
        if span.length > 1:
            pos += 1
        return pos

    if consume_match:
        return span.start
    if modal_state is not ModalState.NORMAL:
        return span.end
    # Mirror of the forward rule, anchored on the last matched character.
    pos = span.end - 1 + span.length
    if span.length > 1:
        pos -= 1
    return pos


class SnipeSearch:
    """Finds the target of a snipe and where the cursor should land."""

    def __init__(
        self,
        scopes: ScopeResolver,
        *,
        smart_case: bool = True,
        skip_whitespace: bool = True,
    ):
        self.scopes = scopes
        self.smart_case = smart_case
        self.skip_whitespace = skip_whitespace

    def seek(
        self,
        context: SearchContext,
        count: int,
        patterns: Sequence[KeyPattern],
        *,
        consume_match: bool = True,
        repeat: bool = False,
    ) -> SearchResult:
        """Locate the `|count|`-th match in the direction given by the sign of `count`.

        Raises:
            EmptyKeys: if `patterns` is empty.
            NotFound: if neither the primary nor the spillover scope has the match.
        """
        if not patterns:
            raise EmptyKeys()
        count = count or 1
        direction = Direction.of(count)
        magnitude = abs(count)
        regex = compile_patterns(patterns, self.smart_case)
        literal = literal_text(patterns)

        mode = self.scopes.mode_for(magnitude, repeat=repeat)
        spillover = self.scopes.spillover_scope
        retries = 1 if spillover is not None and spillover is not mode else 0
        spilled = False
        while True:
            span = self._attempt(context, regex, literal, direction, magnitude, consume_match, mode)
            if span is not None:
                position = self._landing(context.document, span, direction, consume_match, context.modal_state, literal)
                logger.debug("snipe %r -> %s, cursor %d", literal, span, position)
                return SearchResult(position, span, mode, direction, spilled=spilled)
            if not retries:
                break
            retries -= 1
            logger.debug("no match for %r in %s scope, spilling over to %s", literal, mode.value, spillover.value)
            mode = spillover
            spilled = True

        raise NotFound(literal)

    def _attempt(self, context, regex, literal, direction, magnitude, consume_match, mode: ScopeMode) -> Span | None:
        doc = context.document
        cursor = doc.clamp(context.cursor)
        forward = direction is Direction.FORWARD

        if self.skip_whitespace and _is_blank(literal):
            boundary = doc.indentation(cursor)
            if forward and cursor < boundary:
                cursor = boundary - 1
            elif not forward and cursor <= boundary:
                cursor = doc.line_start(cursor)

        bounds = compute_bounds(context.moved(cursor), direction, mode)
        if forward:
            origin = cursor + (1 if consume_match else 2)
            return find_forward(regex, doc.text, origin, bounds, magnitude)
        limit = cursor - (0 if consume_match else 1)
        return find_backward(regex, doc.text, limit, bounds, magnitude)

    def _landing(self, doc: Document, span: Span, direction, consume_match, modal_state, literal: str) -> int:
        position = place_cursor(span, direction, consume_match, modal_state)
        if self.skip_whitespace and direction is Direction.FORWARD and _is_blank(literal):
            run = doc.blank_run(position)
            if run >= 2:
                position += run - span.length
        return doc.clamp(position)
