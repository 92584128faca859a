"""Snipe motion registry and the engine that dispatches motions.

The engine is UI-agnostic: it talks to the editor through `SnipeHost`
and can be driven either by pushing keys (`begin` + `feed`) or by
pulling them from a blocking key source (`run`).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Protocol

from .aliases import KeyAliasResolver
from .collector import CollectStatus, KeyCollector
from .document import SearchContext
from .exceptions import EmptyKeys, SnipeError
from .highlight import HighlightManager, HighlightSink
from .matcher import compile_patterns
from .repeat import RepeatState
from .scope import ScopeResolver, compute_bounds
from .search import SnipeSearch
from .types import Direction, LastSnipe, ModalState, SearchResult, SnipeRequest

if TYPE_CHECKING:
    from snipe.config import SnipeSettings

logger = logging.getLogger(__name__)


class SnipeHost(HighlightSink, Protocol):
    """What the engine needs from the host editor."""

    def snapshot(self) -> SearchContext:
        """Current text, cursor, visible window and modal state."""
        ...

    def jump_cursor(self, offset: int) -> None:
        ...

    def reveal(self, offset: int, *, center: bool) -> None:
        """Scroll so `offset` is visible, re-centering when `center` is set."""
        ...

    def show_prompt(self, text: str | None) -> None:
        """Show collection progress, or hide it with None."""
        ...


@dataclass(frozen=True)
class MotionSpec:
    """A snipe motion binding."""

    name: str
    key_count: int
    direction: Direction
    consume_match: bool
    key: str
    reverse_key: str

    def request(self, count: int = 1) -> SnipeRequest:
        return SnipeRequest(self.key_count, self.direction, count, self.consume_match)


MOTIONS: dict[str, MotionSpec] = {}


def define_snipe(
    forward_key: str,
    backward_key: str,
    key_count: int,
    *,
    consume_match: bool = True,
) -> tuple[MotionSpec, MotionSpec]:
    """Register a forward/backward pair of snipe motions.

    The pair is named after its keys (``snipe_s`` / ``snipe_S``); each key
    repeats its own motion and the other reverses it.
    """
    if key_count < 1:
        raise ValueError("key_count must be at least 1")
    forward = MotionSpec(
        f"snipe_{forward_key}", key_count, Direction.FORWARD, consume_match, forward_key, backward_key
    )
    backward = MotionSpec(
        f"snipe_{backward_key}", key_count, Direction.BACKWARD, consume_match, backward_key, forward_key
    )
    MOTIONS[forward.name] = forward
    MOTIONS[backward.name] = backward
    return forward, backward


define_snipe("s", "S", 2, consume_match=True)
define_snipe("x", "X", 2, consume_match=False)
define_snipe("f", "F", 1, consume_match=True)
define_snipe("t", "T", 1, consume_match=False)


class SnipeEngine:
    """Coordinates key collection, search, highlighting and repeats."""

    def __init__(
        self,
        host: SnipeHost,
        settings: SnipeSettings | None = None,
        *,
        repeat_state: RepeatState | None = None,
        prompt_actions: Mapping[str, str] | None = None,
    ):
        from snipe.config import SnipeSettings

        self.host = host
        self.repeat_state = repeat_state or RepeatState()
        self.highlights = HighlightManager(host)
        self._prompt_actions = prompt_actions
        self._collector: KeyCollector | None = None
        self._pending: tuple[MotionSpec, int] | None = None
        self._transient: dict[str, int] = {}
        self.aliases = KeyAliasResolver()
        self.configure(settings or SnipeSettings())

    def configure(self, settings: SnipeSettings) -> None:
        """Apply new settings; the repeat record and local aliases survive."""
        self.settings = settings
        self.aliases.set_global_aliases(settings.aliases)
        self.scopes = ScopeResolver(settings.scope, settings.repeat_scope, settings.spillover_scope)
        self.search = SnipeSearch(
            self.scopes,
            smart_case=settings.smart_case,
            skip_whitespace=settings.skip_leading_whitespace,
        )

    @property
    def last(self) -> LastSnipe | None:
        return self.repeat_state.last

    @property
    def collecting(self) -> bool:
        return self._collector is not None

    @property
    def transient_keys(self) -> tuple[str, ...]:
        return tuple(self._transient)

    # ------------------------------------------------------------------
    # Key collection
    # ------------------------------------------------------------------

    def begin(self, name: str, count: int = 1) -> KeyCollector:
        """Start collecting keys for the motion `name`."""
        spec = MOTIONS.get(name)
        if spec is None:
            raise KeyError(f"Unknown snipe motion: {name}")
        if self._collector is not None:
            self.cancel()
        self._transient = {}
        count = max(1, count)
        collector = KeyCollector(
            spec.key_count,
            allow_increment=self.settings.tab_increment,
            actions=self._prompt_actions,
            on_change=partial(self._on_keys_changed, spec, count),
            on_abort=self.highlights.clear_all,
        )
        self._collector = collector
        self._pending = (spec, count)
        self._update_prompt()
        return collector

    def feed(self, key: str) -> int | None:
        """Feed one key to the active collection.

        Returns the new cursor offset once a motion completes, otherwise None.
        Raises NotFound / NothingToRepeat when the resulting motion fails.
        """
        collector = self._collector
        if collector is None or self._pending is None:
            return None
        step = collector.feed(key)
        if not step.finished:
            self._update_prompt()
            return None

        spec, count = self._pending
        self._collector = None
        self._pending = None
        self.host.show_prompt(None)

        if step.status is CollectStatus.ABORT:
            return None
        if step.status is CollectStatus.REPEAT:
            if spec.direction is Direction.FORWARD:
                return self.repeat(count)
            return self.repeat_reverse(count)
        return self.execute(spec, step.keys, count)

    def run(self, name: str, count: int, next_key: Callable[[], str]) -> int | None:
        """Collect keys from a blocking source, then perform the motion."""
        self.begin(name, count)
        result = None
        while self._collector is not None:
            result = self.feed(next_key())
        return result

    def cancel(self) -> None:
        """Abandon any collection in progress."""
        if self._collector is not None:
            logger.debug("snipe collection cancelled")
        self._collector = None
        self._pending = None
        self.highlights.clear_all()
        self.host.show_prompt(None)

    # ------------------------------------------------------------------
    # Motions
    # ------------------------------------------------------------------

    def execute(self, spec: MotionSpec, keys: tuple[str, ...], count: int = 1) -> int:
        """Run a motion with already-collected keys and record it for repeats."""
        request = spec.request(max(1, count))
        state = self.host.snapshot().modal_state
        position = self.seek(request.signed_count, keys, spec.consume_match, spec.key_count)
        transient = (spec.key, spec.reverse_key) if self.settings.repeat_keys else ()
        if self.repeat_state.record(request.signed_count, keys, spec.consume_match, spec.key_count, transient):
            self._arm_transient(transient, state)
        return position

    def seek(
        self,
        count: int,
        keys: tuple[str, ...],
        consume_match: bool = True,
        key_count: int | None = None,
        *,
        repeat: bool = False,
    ) -> int:
        """Search for `keys` and move the host cursor to the result."""
        if not keys:
            raise EmptyKeys()
        context = self.host.snapshot()
        patterns = self.aliases.resolve_all(keys)
        self.highlights.clear_all()
        result = self.search.seek(context, count, patterns, consume_match=consume_match, repeat=repeat)
        self.host.jump_cursor(result.position)
        if self.settings.follow_viewport:
            self._follow(context, result.position)
        if self.settings.highlight:
            self._highlight_result(context, result, patterns)
        return result.position

    def repeat(self, count: int = 1) -> int:
        """Repeat the last snipe in its own direction."""
        return self.repeat_state.replay(self._replay_seek, count)

    def repeat_reverse(self, count: int = 1) -> int:
        """Repeat the last snipe in the opposite direction."""
        return self.repeat_state.replay_reverse(self._replay_seek, count)

    def handle_transient_key(self, key: str, count: int = 1) -> bool:
        """Handle a key pressed right after a snipe.

        The motion key repeats and its pair reverses; any other key ends
        the transient bindings and is left for the host.
        """
        if not self._transient:
            return False
        sign = self._transient.get(key)
        if sign is None:
            self._transient = {}
            return False
        try:
            if sign > 0:
                self.repeat(count)
            else:
                self.repeat_reverse(count)
        except SnipeError:
            self._transient = {}
            raise
        return True

    def on_user_action(self) -> None:
        """Let pending highlight cleanup fire; call on every user key."""
        self.highlights.on_user_action()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _replay_seek(self, count: int, keys: tuple[str, ...], consume_match: bool, key_count: int) -> int:
        return self.seek(count, keys, consume_match, key_count, repeat=True)

    def _arm_transient(self, transient: tuple[str, ...], state: ModalState) -> None:
        if not transient or state is ModalState.OPERATOR:
            self._transient = {}
            return
        same, reverse = transient
        self._transient = {same: 1, reverse: -1}

    def _update_prompt(self) -> None:
        if self._collector is not None and self.settings.show_prompt:
            self.host.show_prompt(self._collector.prompt())

    def _on_keys_changed(self, spec: MotionSpec, count: int, keys: tuple[str, ...]) -> None:
        if not self.settings.incremental_highlight:
            return
        self.highlights.clear_all()
        if not keys:
            return
        context = self.host.snapshot()
        regex = compile_patterns(self.aliases.resolve_all(keys), self.settings.smart_case)
        bounds = self.scopes.bounds(context, spec.direction, count)
        self.highlights.highlight_all(regex, context.document.text, bounds)
        self.highlights.schedule_cleanup()

    def _highlight_result(self, context: SearchContext, result: SearchResult, patterns) -> None:
        regex = compile_patterns(patterns, self.settings.smart_case)
        bounds = compute_bounds(context.moved(result.position), result.direction, result.scope)
        self.highlights.highlight_all(regex, context.document.text, bounds)
        self.highlights.highlight_first(result.match)
        self.highlights.schedule_cleanup()

    def _follow(self, context: SearchContext, position: int) -> None:
        viewport = context.viewport
        if viewport.start <= position < viewport.end:
            return
        doc = context.document
        first_row = doc.row_of(viewport.start)
        last_row = doc.row_of(max(viewport.start, viewport.end - 1))
        height = last_row - first_row + 1
        row = doc.row_of(position)
        distance = first_row - row if row < first_row else row - last_row
        self.host.reveal(position, center=distance > height // 2)
