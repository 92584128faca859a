"""Keymap for snipe motions and their host editor (UI-agnostic).

Bindings are grouped by context. The text area picks the contexts that
apply to its modal state (plus `OVERRIDE` when override mode is on) and
takes the first action bound to a key.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

# Contexts
NORMAL = "normal"
VISUAL = "visual"
OPERATOR = "operator"
OVERRIDE = "override"
SNEAK = "sneak"
PROMPT = "snipe_prompt"

_KEY_LABELS: dict[str, str] = {
    "semicolon": ";",
    "comma": ",",
    "escape": "esc",
    "enter": "<enter>",
    "backspace": "<bs>",
    "tab": "<tab>",
}


def format_key(key: str) -> str:
    """Short label for a key in hints, e.g. ``^g`` for ``ctrl+g``."""
    if key.startswith("ctrl+"):
        return "^" + key.partition("+")[2]
    return _KEY_LABELS.get(key, key)


@dataclass(frozen=True)
class ActionKeyDef:
    """One key bound to an action in a context."""

    key: str
    action: str
    context: str | None = None
    primary: bool = True  # secondary keys work but are not shown in hints


class KeymapProvider(ABC):
    """Source of key bindings; subclass to customise them."""

    @abstractmethod
    def get_action_keys(self) -> list[ActionKeyDef]:
        raise NotImplementedError

    def _bindings(self, context: str | None = None) -> list[ActionKeyDef]:
        return [ak for ak in self.get_action_keys() if context is None or ak.context == context]

    def action(self, action_name: str, context: str | None = None) -> str | None:
        """The key shown for `action_name`: its first primary key, else any key."""
        keys = [ak for ak in self._bindings(context) if ak.action == action_name]
        for ak in keys:
            if ak.primary:
                return ak.key
        return keys[0].key if keys else None

    def actions_for_key(self, key: str, context: str | None = None) -> list[str]:
        return [ak.action for ak in self._bindings(context) if ak.key == key]

    def context_map(self, context: str) -> dict[str, str]:
        """Key -> action for one context; earlier bindings shadow later ones."""
        mapping: dict[str, str] = {}
        for ak in self._bindings(context):
            mapping.setdefault(ak.key, ak.action)
        return mapping

    def hint(self, pairs: list[tuple[str, str]], context: str | None = None) -> str:
        """Render ``key label`` hints for the given (action, label) pairs."""
        parts = []
        for action_name, label in pairs:
            key = self.action(action_name, context)
            if key is not None:
                parts.append(f"{format_key(key)} {label}")
        return "  ".join(parts)


class DefaultKeymapProvider(KeymapProvider):
    """Default keymap with hardcoded bindings."""

    def get_action_keys(self) -> list[ActionKeyDef]:
        return [
            # Two-character snipes
            ActionKeyDef("s", "snipe_s", NORMAL),
            ActionKeyDef("S", "snipe_S", NORMAL),
            ActionKeyDef("s", "snipe_s", VISUAL),
            ActionKeyDef("S", "snipe_S", VISUAL),
            ActionKeyDef("z", "snipe_s", OPERATOR),
            ActionKeyDef("Z", "snipe_S", OPERATOR),
            ActionKeyDef("x", "snipe_x", OPERATOR),
            ActionKeyDef("X", "snipe_X", OPERATOR),
            ActionKeyDef("x", "snipe_x", VISUAL),
            ActionKeyDef("X", "snipe_X", VISUAL),
            # vim-sneak style operator bindings
            ActionKeyDef("z", "snipe_x", SNEAK),
            ActionKeyDef("Z", "snipe_X", SNEAK),
            # One-character snipes replacing f/F/t/T
            ActionKeyDef("f", "snipe_f", OVERRIDE),
            ActionKeyDef("F", "snipe_F", OVERRIDE),
            ActionKeyDef("t", "snipe_t", OVERRIDE),
            ActionKeyDef("T", "snipe_T", OVERRIDE),
            ActionKeyDef(";", "snipe_repeat", OVERRIDE),
            ActionKeyDef(",", "snipe_repeat_reverse", OVERRIDE),
            # Key collection prompt
            ActionKeyDef("enter", "confirm", PROMPT),
            ActionKeyDef("escape", "cancel", PROMPT),
            ActionKeyDef("ctrl+g", "cancel", PROMPT, primary=False),
            ActionKeyDef("backspace", "erase", PROMPT),
            ActionKeyDef("tab", "increment", PROMPT),
            # Host editor
            ActionKeyDef("v", "toggle_visual", NORMAL),
            ActionKeyDef("v", "toggle_visual", VISUAL),
            ActionKeyDef("escape", "exit_visual", VISUAL),
            ActionKeyDef("y", "operator_yank", NORMAL),
            ActionKeyDef("y", "yank_selection", VISUAL),
            ActionKeyDef("escape", "cancel_operator", OPERATOR),
        ]


_provider: KeymapProvider | None = None


def get_keymap() -> KeymapProvider:
    """The active keymap, created on first use."""
    global _provider
    if _provider is None:
        _provider = DefaultKeymapProvider()
    return _provider


def set_keymap(provider: KeymapProvider) -> None:
    """Install a custom keymap; widgets created afterwards use it."""
    global _provider
    _provider = provider


def reset_keymap() -> None:
    global _provider
    _provider = None
