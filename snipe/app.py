"""Main Textual application for snipe."""

from __future__ import annotations

from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, Static

from .config import SnipeSettings
from .core.keymap import NORMAL, OVERRIDE, get_keymap
from .ui.widgets_text_area import SnipeTextArea


class SnipeApp(App):
    """Pager for a single file with snipe motions."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #snipe-editor {
        height: 1fr;
    }

    #snipe-prompt {
        height: 1;
        padding: 0 1;
        color: $warning;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("ctrl+q", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        text: str = "",
        *,
        settings: SnipeSettings | None = None,
        path: Path | None = None,
    ) -> None:
        super().__init__()
        self._text = text
        self._settings = settings or SnipeSettings()
        self._path = path

    def compose(self) -> ComposeResult:
        yield Header()
        yield SnipeTextArea(
            self._text,
            settings=self._settings,
            show_line_numbers=True,
            id="snipe-editor",
        )
        yield Static("", id="snipe-prompt", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        if self._path is not None:
            self.title = f"snipe - {self._path.name}"
        self.sub_title = self._key_hint()
        self.editor.focus()

    def _key_hint(self) -> str:
        keymap = get_keymap()
        hint = keymap.hint([("snipe_s", "snipe"), ("snipe_S", "back"), ("toggle_visual", "visual")], NORMAL)
        if self._settings.override_mode:
            extra = keymap.hint([("snipe_repeat", "repeat"), ("snipe_repeat_reverse", "reverse")], OVERRIDE)
            hint = f"{hint}  {extra}"
        return hint

    @property
    def editor(self) -> SnipeTextArea:
        return self.query_one("#snipe-editor", SnipeTextArea)

    def on_snipe_text_area_prompt_changed(self, message: SnipeTextArea.PromptChanged) -> None:
        self.query_one("#snipe-prompt", Static).update(message.text or "")

    def on_snipe_text_area_yanked(self, message: SnipeTextArea.Yanked) -> None:
        self.notify(f"Yanked {len(message.text)} characters")
