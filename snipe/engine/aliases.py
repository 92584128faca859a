"""Per-character alias resolution.

An alias maps a typed key to a regex fragment, e.g. ``"["`` to
``"[[{(]"`` so one key matches any opening bracket. Keys without an alias
match themselves literally.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable

from .exceptions import InvalidAlias
from .types import KeyPattern


@runtime_checkable
class AliasResolver(Protocol):
    """Source of alias patterns."""

    def lookup(self, char: str) -> str | None:
        """Return the alias pattern for `char`, or None."""
        ...


class MappingAliasResolver:
    """Aliases backed by a plain mapping, validated on construction."""

    def __init__(self, aliases: Mapping[str, str] | None = None):
        self._aliases: dict[str, str] = {}
        for char, pattern in (aliases or {}).items():
            try:
                re.compile(pattern)
            except re.error as e:
                raise InvalidAlias(char, pattern, str(e)) from e
            self._aliases[char] = pattern

    def lookup(self, char: str) -> str | None:
        return self._aliases.get(char)

    def __len__(self) -> int:
        return len(self._aliases)


class ChainedAliasResolver:
    """Resolvers consulted in priority order; the first hit wins."""

    def __init__(self, *resolvers: AliasResolver):
        self._resolvers = resolvers

    def lookup(self, char: str) -> str | None:
        for resolver in self._resolvers:
            pattern = resolver.lookup(char)
            if pattern is not None:
                return pattern
        return None


class KeyAliasResolver:
    """Turns typed keys into match patterns.

    Local aliases (installed per editing context) shadow the global ones.
    """

    def __init__(self, global_aliases: Mapping[str, str] | None = None):
        self._global = MappingAliasResolver(global_aliases)
        self._local: MappingAliasResolver | None = None

    def set_global_aliases(self, aliases: Mapping[str, str] | None) -> None:
        """Replace the global layer; local aliases stay installed."""
        self._global = MappingAliasResolver(aliases)

    def set_local_aliases(self, aliases: Mapping[str, str] | None) -> None:
        """Install (or with None, remove) context-local aliases."""
        self._local = MappingAliasResolver(aliases) if aliases else None

    @property
    def resolver(self) -> AliasResolver:
        if self._local is None:
            return self._global
        return ChainedAliasResolver(self._local, self._global)

    def resolve(self, char: str) -> KeyPattern:
        pattern = self.resolver.lookup(char)
        if pattern is None:
            pattern = re.escape(char)
        return KeyPattern(char, pattern)

    def resolve_all(self, keys: Iterable[str]) -> tuple[KeyPattern, ...]:
        resolver = self.resolver
        patterns = []
        for char in keys:
            pattern = resolver.lookup(char)
            patterns.append(KeyPattern(char, re.escape(char) if pattern is None else pattern))
        return tuple(patterns)
