"""Interactive collection of snipe keys."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum, auto

from .exceptions import readable_text

logger = logging.getLogger(__name__)

CONFIRM = "confirm"
CANCEL = "cancel"
ERASE = "erase"
INCREMENT = "increment"

DEFAULT_PROMPT_ACTIONS: dict[str, str] = {
    "enter": CONFIRM,
    "escape": CANCEL,
    "ctrl+g": CANCEL,
    "backspace": ERASE,
    "tab": INCREMENT,
}

# Named keys that stand for a literal character when not bound to an action.
LITERAL_TOKENS: dict[str, str] = {
    "tab": "\t",
    "space": " ",
}


class CollectStatus(Enum):
    PENDING = auto()
    DONE = auto()
    REPEAT = auto()
    ABORT = auto()


@dataclass(frozen=True)
class CollectStep:
    """Result of feeding one key to a collector."""

    status: CollectStatus
    keys: tuple[str, ...] = ()

    @property
    def finished(self) -> bool:
        return self.status is not CollectStatus.PENDING


class _Sentinel:
    def __init__(self, name: str):
        self._name = name

    def __repr__(self) -> str:
        return self._name


REPEAT = _Sentinel("REPEAT")
ABORT = _Sentinel("ABORT")


class KeyCollector:
    """Accumulates exactly `key_count` characters, one key at a time.

    `on_change` runs after every buffered or erased character with the
    in-progress keys (used for incremental highlighting); `on_abort` runs
    when collection is cancelled.
    """

    def __init__(
        self,
        key_count: int,
        *,
        allow_increment: bool = False,
        actions: Mapping[str, str] | None = None,
        on_change: Callable[[tuple[str, ...]], None] | None = None,
        on_abort: Callable[[], None] | None = None,
    ):
        if key_count < 1:
            raise ValueError("key_count must be at least 1")
        self.key_count = key_count
        self.allow_increment = allow_increment
        self._actions = dict(DEFAULT_PROMPT_ACTIONS if actions is None else actions)
        self._on_change = on_change
        self._on_abort = on_abort
        self._keys: list[str] = []
        self.remaining = key_count
        self._result: CollectStep | None = None

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(self._keys)

    @property
    def result(self) -> CollectStep | None:
        return self._result

    def prompt(self) -> str:
        """Progress text: remaining count, then the keys typed so far."""
        return f"{self.remaining}>{readable_text(''.join(self._keys))}"

    def feed(self, key: str) -> CollectStep:
        """Process one key: a literal character or a named key."""
        if self._result is not None:
            return self._result

        action = self._actions.get(key)
        if action == INCREMENT and not self.allow_increment:
            action = None

        if action == INCREMENT:
            self.remaining += 1
        elif action == CONFIRM:
            if not self._keys:
                return self._finish(CollectStatus.REPEAT)
            return self._finish(CollectStatus.DONE)
        elif action == CANCEL:
            return self._abort()
        elif action == ERASE:
            self.remaining += 1
            if len(self._keys) < 2:
                return self._abort()
            self._keys.pop()
            self._changed()
        else:
            self._keys.append(LITERAL_TOKENS.get(key, key))
            self.remaining -= 1
            self._changed()

        if self.remaining <= 0:
            return self._finish(CollectStatus.DONE)
        return CollectStep(CollectStatus.PENDING, self.keys)

    def collect(self, next_key: Callable[[], str]) -> tuple[str, ...] | _Sentinel:
        """Block on `next_key` until collection finishes.

        Returns the collected keys, `REPEAT` or `ABORT`.
        """
        step = self._result
        while step is None or not step.finished:
            step = self.feed(next_key())
        if step.status is CollectStatus.REPEAT:
            return REPEAT
        if step.status is CollectStatus.ABORT:
            return ABORT
        return step.keys

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self.keys)

    def _abort(self) -> CollectStep:
        logger.debug("snipe key collection aborted")
        if self._on_abort is not None:
            self._on_abort()
        return self._finish(CollectStatus.ABORT)

    def _finish(self, status: CollectStatus) -> CollectStep:
        self._result = CollectStep(status, self.keys if status is CollectStatus.DONE else ())
        return self._result
