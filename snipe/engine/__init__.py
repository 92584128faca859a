"""Snipe motion engine: multi-character incremental search motions."""

from .aliases import AliasResolver, ChainedAliasResolver, KeyAliasResolver, MappingAliasResolver
from .collector import ABORT, REPEAT, CollectStatus, CollectStep, KeyCollector
from .document import Document, SearchContext, Viewport
from .exceptions import (
    EmptyKeys,
    InvalidAlias,
    InvalidScope,
    NotFound,
    NothingToRepeat,
    SnipeError,
)
from .highlight import PRIMARY, SECONDARY, CleanupToken, HighlightManager
from .motions import MOTIONS, MotionSpec, SnipeEngine, SnipeHost, define_snipe
from .repeat import RepeatState
from .scope import ScopeResolver, compute_bounds
from .search import SnipeSearch, place_cursor
from .types import (
    Direction,
    KeyPattern,
    LastSnipe,
    ModalState,
    Position,
    ScopeMode,
    SearchBounds,
    SearchResult,
    SnipeRequest,
    Span,
)

__all__ = [
    # Aliases
    "AliasResolver",
    "ChainedAliasResolver",
    "KeyAliasResolver",
    "MappingAliasResolver",
    # Collection
    "ABORT",
    "REPEAT",
    "CollectStatus",
    "CollectStep",
    "KeyCollector",
    # Documents
    "Document",
    "SearchContext",
    "Viewport",
    # Errors
    "EmptyKeys",
    "InvalidAlias",
    "InvalidScope",
    "NotFound",
    "NothingToRepeat",
    "SnipeError",
    # Highlights
    "PRIMARY",
    "SECONDARY",
    "CleanupToken",
    "HighlightManager",
    # Motions
    "MOTIONS",
    "MotionSpec",
    "SnipeEngine",
    "SnipeHost",
    "define_snipe",
    # Repeat
    "RepeatState",
    # Scope and search
    "ScopeResolver",
    "SnipeSearch",
    "compute_bounds",
    "place_cursor",
    # Types
    "Direction",
    "KeyPattern",
    "LastSnipe",
    "ModalState",
    "Position",
    "ScopeMode",
    "SearchBounds",
    "SearchResult",
    "SnipeRequest",
    "Span",
]
