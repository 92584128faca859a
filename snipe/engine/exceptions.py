"""Exceptions raised by the snipe engine."""

from __future__ import annotations

# Control characters that get a named token in user-facing messages.
_READABLE_TOKENS: dict[str, str] = {
    "\t": "<TAB>",
    "\n": "<RET>",
    "\r": "<CR>",
    "\x1b": "<ESC>",
}


def readable_text(text: str) -> str:
    """Render control characters in searched text as visible tokens."""
    parts = []
    for ch in text:
        if ch in _READABLE_TOKENS:
            parts.append(_READABLE_TOKENS[ch])
        elif ord(ch) < 32:
            parts.append(f"^{chr(ord(ch) + 64)}")
        else:
            parts.append(ch)
    return "".join(parts)


class SnipeError(Exception):
    """Base class for snipe errors."""


class NotFound(SnipeError):
    """Raised when a search exhausts every eligible scope."""

    def __init__(self, text: str):
        self.text = text
        self.readable = readable_text(text)
        super().__init__(f"Can't find {self.readable}")


class NothingToRepeat(SnipeError):
    """Raised when a repeat is requested before any snipe ran."""

    def __init__(self) -> None:
        super().__init__("Nothing to repeat")


class EmptyKeys(SnipeError, ValueError):
    """Raised when a search is invoked without any keys."""

    def __init__(self) -> None:
        super().__init__("Snipe search requires at least one key")


class InvalidScope(SnipeError, ValueError):
    """Raised for an unrecognized scope setting."""

    def __init__(self, value: object, setting: str = "scope"):
        self.value = value
        self.setting = setting
        super().__init__(f"Invalid {setting}: {value!r}")


class InvalidAlias(SnipeError, ValueError):
    """Raised when an alias is not a usable regex fragment."""

    def __init__(self, char: str, pattern: str, error: str):
        self.char = char
        self.pattern = pattern
        super().__init__(f"Invalid alias for {char!r}: {pattern!r} ({error})")
