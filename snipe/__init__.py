"""snipe - multi-character snipe motions for Textual text areas."""

from typing import TYPE_CHECKING, Any

__all__ = [
    "__version__",
    "main",
    "SnipeApp",
    "SnipeEngine",
    "SnipeSettings",
    "SnipeTextArea",
]

__version__ = "0.1.0"

if TYPE_CHECKING:
    from .app import SnipeApp
    from .cli import main
    from .config import SnipeSettings
    from .engine.motions import SnipeEngine
    from .ui.widgets_text_area import SnipeTextArea


def __getattr__(name: str) -> Any:
    """Lazy import for Textual modules to keep package import side-effect free."""
    if name == "main":
        from .cli import main

        return main
    if name == "SnipeApp":
        from .app import SnipeApp

        return SnipeApp
    if name == "SnipeTextArea":
        from .ui.widgets_text_area import SnipeTextArea

        return SnipeTextArea
    if name == "SnipeEngine":
        from .engine.motions import SnipeEngine

        return SnipeEngine
    if name == "SnipeSettings":
        from .config import SnipeSettings

        return SnipeSettings
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
