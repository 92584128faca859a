"""Text-area widget hosting snipe motions."""

from __future__ import annotations

import itertools
from collections.abc import Hashable, Mapping

from rich.style import Style
from rich.text import Text
from textual.events import Key
from textual.geometry import Region, Spacing
from textual.message import Message
from textual.widgets import TextArea
from textual.widgets.text_area import Selection

from snipe.config import SnipeSettings
from snipe.core.keymap import (
    NORMAL,
    OPERATOR,
    OVERRIDE,
    PROMPT,
    SNEAK,
    VISUAL,
    KeymapProvider,
    get_keymap,
)
from snipe.engine import (
    MOTIONS,
    PRIMARY,
    SECONDARY,
    Document,
    ModalState,
    NotFound,
    NothingToRepeat,
    RepeatState,
    SearchContext,
    SnipeEngine,
    Span,
)

# Named keys passed to the engine by name rather than by character.
_NAMED_KEYS = frozenset({"enter", "escape", "backspace", "tab", "ctrl+g"})


class SnipeTextArea(TextArea):
    """Read-only TextArea with snipe motions, visual selection and yank."""

    HIGHLIGHT_STYLES: dict[str, Style] = {
        PRIMARY: Style(color="black", bgcolor="yellow", bold=True),
        SECONDARY: Style(underline=True, bold=True),
    }

    class PromptChanged(Message):
        """Snipe key-collection progress changed (None hides it)."""

        def __init__(self, text: str | None) -> None:
            self.text = text
            super().__init__()

    class Yanked(Message):
        """Text was copied by the yank operator."""

        def __init__(self, text: str) -> None:
            self.text = text
            super().__init__()

    def __init__(
        self,
        text: str = "",
        *,
        settings: SnipeSettings | None = None,
        repeat_state: RepeatState | None = None,
        keymap: KeymapProvider | None = None,
        local_aliases: Mapping[str, str] | None = None,
        read_only: bool = True,
        **kwargs,
    ) -> None:
        kwargs.setdefault("soft_wrap", False)
        super().__init__(text, read_only=read_only, **kwargs)
        self._keymap = keymap or get_keymap()
        self._handles = itertools.count(1)
        self._highlight_segments: dict[Hashable, list[tuple[int, int, int, str]]] = {}
        self._visual_anchor: tuple[int, int] | None = None
        # (character under the visual cursor, selection end one past it)
        self._visual_point: tuple[tuple[int, int], tuple[int, int]] | None = None
        self._operator: str | None = None
        self._count_buffer = ""
        self._doc_cache: Document | None = None
        self.engine = SnipeEngine(
            self,
            settings,
            repeat_state=repeat_state,
            prompt_actions=self._keymap.context_map(PROMPT),
        )
        self.set_local_aliases(local_aliases)

    def set_local_aliases(self, aliases: Mapping[str, str] | None) -> None:
        """Aliases for this editor only, shadowing the ones from settings."""
        self.engine.aliases.set_local_aliases(aliases)

    # ------------------------------------------------------------------
    # Modal state
    # ------------------------------------------------------------------

    @property
    def modal_state(self) -> ModalState:
        if self._operator is not None:
            return ModalState.OPERATOR
        if self._visual_anchor is not None:
            return ModalState.VISUAL
        return ModalState.NORMAL

    def _contexts(self) -> list[str]:
        settings = self.engine.settings
        state = self.modal_state
        if state is ModalState.OPERATOR:
            contexts = [SNEAK, OPERATOR] if settings.use_sneak_bindings else [OPERATOR]
        elif state is ModalState.VISUAL:
            contexts = [VISUAL]
        else:
            contexts = [NORMAL]
        if settings.override_mode:
            contexts.append(OVERRIDE)
        return contexts

    def _action_for(self, token: str) -> str | None:
        for context in self._contexts():
            actions = self._keymap.actions_for_key(token, context)
            if actions:
                return actions[0]
        return None

    # ------------------------------------------------------------------
    # Host protocol
    # ------------------------------------------------------------------

    def _document(self) -> Document:
        text = self.text
        if self._doc_cache is None or self._doc_cache.text != text:
            self._doc_cache = Document(text)
        return self._doc_cache

    def snapshot(self) -> SearchContext:
        doc = self._document()
        row, col = self._origin()
        first_row = int(self.scroll_offset.y)
        height = max(1, self.scrollable_content_region.height)
        viewport = doc.viewport(first_row, first_row + height - 1)
        return SearchContext(doc, doc.offset(row, col), viewport, self.modal_state)

    def _origin(self) -> tuple[int, int]:
        if self._visual_point is not None:
            point, end = self._visual_point
            if self.selection.end == end:
                return point
        return self.cursor_location

    def jump_cursor(self, offset: int) -> None:
        doc = self._document()
        location = doc.location(offset)
        target = (location.row, location.col)
        if self._operator is not None:
            self._apply_operator(target)
        elif self._visual_anchor is not None:
            self._select_to(doc, offset, target)
        else:
            self.cursor_location = target

    def _select_to(self, doc: Document, offset: int, target: tuple[int, int]) -> None:
        anchor = self._visual_anchor
        end = target
        if target >= anchor and offset < doc.end:
            after = doc.location(offset + 1)
            end = (after.row, after.col)
        self._visual_point = (target, end)
        self.selection = Selection(anchor, end)

    def reveal(self, offset: int, *, center: bool) -> None:
        location = self._document().location(offset)
        x, y = self.wrapped_document.location_to_offset((location.row, location.col))
        self.scroll_to_region(
            Region(x, y, width=3, height=1),
            spacing=Spacing(right=self.gutter_width),
            animate=False,
            force=True,
            center=center,
        )

    def show_prompt(self, text: str | None) -> None:
        self.post_message(self.PromptChanged(text))

    def add_highlight(self, span: Span, kind: str, category: str) -> Hashable:
        doc = self._document()
        start = doc.location(span.start)
        end = doc.location(span.end)
        segments = []
        for row in range(start.row, end.row + 1):
            col_start = start.col if row == start.row else 0
            col_end = end.col if row == end.row else doc.row_end(row) - doc.row_start(row)
            if col_end > col_start:
                segments.append((row, col_start, col_end, kind))
        handle = (category, next(self._handles))
        self._highlight_segments[handle] = segments
        self._refresh_lines()
        return handle

    def remove_highlight(self, handle: Hashable) -> None:
        if self._highlight_segments.pop(handle, None) is not None:
            self._refresh_lines()

    @property
    def highlighted_text(self) -> list[tuple[str, str]]:
        """(kind, text) for every highlighted segment, in row order."""
        lines = self.text.split("\n")
        found = []
        for segments in self._highlight_segments.values():
            for row, col_start, col_end, kind in segments:
                found.append((row, col_start, kind, lines[row][col_start:col_end]))
        return [(kind, text) for _row, _col, kind, text in sorted(found)]

    def get_line(self, line_index: int) -> Text:
        line = super().get_line(line_index)
        for segments in self._highlight_segments.values():
            for row, col_start, col_end, kind in segments:
                if row == line_index:
                    line.stylize(self.HIGHLIGHT_STYLES.get(kind, Style(bold=True)), col_start, col_end)
        return line

    def _refresh_lines(self) -> None:
        # Clears the rendered line cache so highlight styles apply
        self.notify_style_update()
        self.refresh()

    # ------------------------------------------------------------------
    # Key handling
    # ------------------------------------------------------------------

    @staticmethod
    def _key_token(event: Key) -> str:
        if event.key in _NAMED_KEYS or not event.is_printable or not event.character:
            return event.key
        return event.character

    async def _on_key(self, event: Key) -> None:
        """Route keys to the snipe engine before default TextArea handling."""
        token = self._key_token(event)
        self.engine.on_user_action()
        try:
            handled = self._dispatch(token)
        except (NotFound, NothingToRepeat) as e:
            self._operator = None
            self.notify(str(e), severity="warning")
            handled = True
        if handled:
            event.prevent_default()
            event.stop()
            return
        await super()._on_key(event)

    def _dispatch(self, token: str) -> bool:
        if self.engine.collecting:
            try:
                self.engine.feed(token)
            finally:
                if not self.engine.collecting:
                    self._operator = None
            return True

        if self.engine.handle_transient_key(token):
            return True

        if token.isdigit() and (token != "0" or self._count_buffer):
            self._count_buffer += token
            return True

        action = self._action_for(token)
        count = self._consume_count()
        if action is None:
            self._operator = None
            return False

        if action in MOTIONS:
            self.engine.begin(action, count)
        elif action == "snipe_repeat":
            self._run_repeat(self.engine.repeat, count)
        elif action == "snipe_repeat_reverse":
            self._run_repeat(self.engine.repeat_reverse, count)
        elif action == "toggle_visual":
            self._toggle_visual()
        elif action == "exit_visual":
            self._exit_visual()
        elif action == "operator_yank":
            self._operator = "y"
        elif action == "yank_selection":
            self._yank(self.selected_text)
            self._exit_visual()
        elif action == "cancel_operator":
            self._operator = None
        return True

    def _run_repeat(self, repeat, count: int) -> None:
        try:
            repeat(count)
        finally:
            self._operator = None

    def _consume_count(self) -> int:
        count = int(self._count_buffer) if self._count_buffer else 1
        self._count_buffer = ""
        return max(1, count)

    def _toggle_visual(self) -> None:
        if self._visual_anchor is None:
            self._visual_anchor = self.cursor_location
        else:
            self._exit_visual()

    def _exit_visual(self) -> None:
        self._visual_anchor = None
        self._visual_point = None
        self.selection = Selection.cursor(self.cursor_location)

    def _apply_operator(self, target: tuple[int, int]) -> None:
        origin = self.cursor_location
        start, end = sorted((origin, target))
        if self._operator == "y":
            self._yank(self.get_text_range(start, end))
        self._operator = None
        self.cursor_location = start

    def _yank(self, text: str) -> None:
        if not text:
            return
        self.app.copy_to_clipboard(text)
        self.post_message(self.Yanked(text))
