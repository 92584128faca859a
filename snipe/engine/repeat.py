"""Record of the last snipe, for repeat commands."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from .exceptions import NothingToRepeat
from .types import LastSnipe

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (count, keys, consume_match, key_count) -> result
SeekFunc = Callable[[int, tuple[str, ...], bool, int], T]


class RepeatState:
    """Single-owner context holding the most recent non-repeat snipe.

    Only the motion dispatcher writes it. Recording while a replay is in
    progress is ignored, so a repeat never overwrites the record with itself.
    """

    def __init__(self) -> None:
        self.last: LastSnipe | None = None
        self._replaying = False

    @property
    def replaying(self) -> bool:
        return self._replaying

    def record(
        self,
        count: int,
        keys: tuple[str, ...],
        consume_match: bool,
        key_count: int,
        transient_keys: tuple[str, ...] = (),
    ) -> bool:
        """Store a snipe; returns False when skipped during a replay."""
        if self._replaying:
            return False
        self.last = LastSnipe(count, tuple(keys), consume_match, key_count, tuple(transient_keys))
        return True

    @contextmanager
    def replay_guard(self) -> Iterator[None]:
        previous = self._replaying
        self._replaying = True
        try:
            yield
        finally:
            self._replaying = previous

    def replay(self, seek: SeekFunc[T], multiplier: int = 1) -> T:
        """Re-run the recorded snipe with its count scaled by `multiplier`."""
        last = self.last
        if last is None:
            raise NothingToRepeat()
        count = last.count * (multiplier or 1)
        logger.debug("repeating snipe %r with count %d", "".join(last.keys), count)
        with self.replay_guard():
            return seek(count, last.keys, last.consume_match, last.key_count)

    def replay_reverse(self, seek: SeekFunc[T], multiplier: int = 1) -> T:
        """Like `replay` but in the opposite direction."""
        return self.replay(seek, -(multiplier or 1))
