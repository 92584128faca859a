"""Configuration for snipe motions.

This module contains the `SnipeSettings` domain type and the helpers that
load and save it. Settings live under the ``"snipe"`` key of the settings
file.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Mapping

from .engine.aliases import MappingAliasResolver
from .engine.types import ScopeMode

logger = logging.getLogger(__name__)

SETTINGS_KEY = "snipe"


@dataclass
class SnipeSettings:
    """Recognized snipe options."""

    # Highlight matches after a jump
    highlight: bool = True
    # Highlight matches while keys are being typed
    incremental_highlight: bool = True
    # Repeat with the motion key right after a snipe
    repeat_keys: bool = True
    scope: ScopeMode = ScopeMode.LINE
    # None means "use scope"
    repeat_scope: ScopeMode | None = None
    # Wider scope for counts above one and for failed searches
    spillover_scope: ScopeMode | None = None
    show_prompt: bool = True
    # Case-sensitive only when the typed keys contain uppercase
    smart_case: bool = True
    follow_viewport: bool = True
    aliases: dict[str, str] = field(default_factory=dict)
    skip_leading_whitespace: bool = True
    # Tab grows the search by one more character
    tab_increment: bool = False
    # Bind f/F/t/T to one-character snipes, with ; and , repeating
    override_mode: bool = True
    # z/Z as the exclusive two-character snipe in operator-pending state
    use_sneak_bindings: bool = False

    def __post_init__(self) -> None:
        self.scope = ScopeMode.parse(self.scope, "scope")
        self.repeat_scope = ScopeMode.parse_optional(self.repeat_scope, "repeat_scope")
        self.spillover_scope = ScopeMode.parse_optional(self.spillover_scope, "spillover_scope")
        # Validates alias patterns; raises InvalidAlias on a bad fragment.
        MappingAliasResolver(self.aliases)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> SnipeSettings:
        """Create settings from a dict, ignoring unknown keys."""
        payload = dict(data or {})
        # Accept the hyphenated option names used in the settings file.
        payload = {key.replace("-", "_"): value for key, value in payload.items()}
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in payload.items() if key in known})

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["scope"] = self.scope.value
        data["repeat_scope"] = self.repeat_scope.value if self.repeat_scope else None
        data["spillover_scope"] = self.spillover_scope.value if self.spillover_scope else None
        return data

    def with_overrides(self, **overrides: Any) -> SnipeSettings:
        """Copy with non-None overrides applied."""
        data = self.to_dict()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return SnipeSettings.from_dict(data)


def load_snipe_settings() -> SnipeSettings:
    """Load snipe settings, falling back to defaults."""
    from .stores.settings import get_store

    return SnipeSettings.from_dict(get_store().section(SETTINGS_KEY))


def save_snipe_settings(settings: SnipeSettings) -> None:
    from .stores.settings import get_store

    store = get_store()
    store.set_section(SETTINGS_KEY, settings.to_dict())
    logger.debug("Saved snipe settings to %s", store.file_path)
