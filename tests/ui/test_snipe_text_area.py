"""UI tests for snipe motions inside the text area."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from textual.widgets import Static

from snipe.app import SnipeApp
from snipe.config import SnipeSettings
from snipe.engine import ModalState, ScopeMode
from snipe.ui.widgets_text_area import SnipeTextArea

TEXT = "the quick quiet quay"


async def _press(pilot, *keys: str) -> None:
    for key in keys:
        await pilot.press(key)
    await pilot.pause()


def _underlined(strip) -> list[str]:
    return [segment.text for segment in strip if segment.style is not None and segment.style.underline]


class TestSnipeMotions:
    """Snipe motions driven by real key events."""

    @pytest.mark.asyncio
    async def test_two_char_snipe(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "s", "q", "u")
            assert app.editor.cursor_location == (0, 4)

    @pytest.mark.asyncio
    async def test_backward_snipe(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            app.editor.cursor_location = (0, 19)
            await _press(pilot, "S", "q", "u")
            assert app.editor.cursor_location == (0, 16)

    @pytest.mark.asyncio
    async def test_count_prefix(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "2", "s", "q", "u")
            assert app.editor.cursor_location == (0, 10)

    @pytest.mark.asyncio
    async def test_prompt_shows_progress(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            prompt = app.query_one("#snipe-prompt", Static)
            await _press(pilot, "s")
            assert str(prompt.content) == "2>"
            await _press(pilot, "q")
            assert str(prompt.content) == "1>q"
            await _press(pilot, "u")
            assert str(prompt.content) == ""

    @pytest.mark.asyncio
    async def test_escape_cancels_collection(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "s", "q", "escape")
            assert app.editor.cursor_location == (0, 0)
            assert not app.editor.engine.collecting

    @pytest.mark.asyncio
    async def test_not_found_notifies(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            with patch.object(app.editor, "notify") as notify:
                await _press(pilot, "s", "z", "z")
            notify.assert_called_once_with("Can't find zz", severity="warning")
            assert app.editor.cursor_location == (0, 0)


class TestRepeats:
    @pytest.mark.asyncio
    async def test_motion_key_repeats_and_pair_reverses(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "s", "q", "u")
            await _press(pilot, "s")
            assert app.editor.cursor_location == (0, 10)
            await _press(pilot, "S")
            assert app.editor.cursor_location == (0, 4)

    @pytest.mark.asyncio
    async def test_enter_at_prompt_repeats(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "s", "q", "u", "j", "s", "enter")
            assert app.editor.cursor_location == (0, 10)

    @pytest.mark.asyncio
    async def test_override_till_with_semicolon_and_comma(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "t", "q")
            assert app.editor.cursor_location == (0, 3)
            await _press(pilot, ";")
            assert app.editor.cursor_location == (0, 9)
            await _press(pilot, ",")
            assert app.editor.cursor_location == (0, 5)

    @pytest.mark.asyncio
    async def test_override_mode_disabled(self):
        app = SnipeApp(TEXT, settings=SnipeSettings(override_mode=False))
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "f", "k")
            assert app.editor.cursor_location == (0, 0)


class TestModalStates:
    @pytest.mark.asyncio
    async def test_visual_selection_includes_match(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "v", "s", "q", "u")
            assert app.editor.selected_text == "the qu"

    @pytest.mark.asyncio
    async def test_yank_visual_selection(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "v", "s", "q", "u", "y")
            assert app.clipboard == "the qu"
            assert app.editor.modal_state is ModalState.NORMAL

    @pytest.mark.asyncio
    async def test_visual_repeat_starts_from_selected_character(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "v", "s", "q", "u", ";")
            assert app.editor.selected_text == "the quick qu"

    @pytest.mark.asyncio
    async def test_visual_backward_selection(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            app.editor.cursor_location = (0, 19)
            await _press(pilot, "v", "S", "q", "u")
            assert app.editor.selected_text == "qua"

    @pytest.mark.asyncio
    async def test_yank_to_inclusive_snipe(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "y", "z", "q", "u")
            assert app.clipboard == "the qu"
            assert app.editor.cursor_location == (0, 0)

    @pytest.mark.asyncio
    async def test_yank_to_exclusive_snipe(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "y", "x", "q", "u")
            assert app.clipboard == "the "

    @pytest.mark.asyncio
    async def test_sneak_bindings(self):
        app = SnipeApp(TEXT, settings=SnipeSettings(use_sneak_bindings=True))
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "y", "z", "q", "u")
            assert app.clipboard == "the "

    @pytest.mark.asyncio
    async def test_no_transient_repeat_after_operator(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "y", "z", "q", "u")
            assert app.editor.engine.transient_keys == ()


class TestHighlights:
    @pytest.mark.asyncio
    async def test_matches_highlighted_after_jump(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "s", "q", "u")
            assert app.editor.highlighted_text == [
                ("primary", "qu"),
                ("secondary", "qu"),
                ("secondary", "qu"),
            ]

    @pytest.mark.asyncio
    async def test_highlights_cleared_on_next_key(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "s", "q", "u", "j")
            assert app.editor.highlighted_text == []

    @pytest.mark.asyncio
    async def test_highlights_rendered_then_cleared(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)) as pilot:
            editor = app.editor
            assert _underlined(editor.render_line(0)) == []
            await _press(pilot, "s", "q", "u")
            assert _underlined(editor.render_line(0)) == ["qu", "qu"]
            await _press(pilot, "j")
            assert _underlined(editor.render_line(0)) == []


class TestApp:
    @pytest.mark.asyncio
    async def test_subtitle_shows_key_hint(self):
        app = SnipeApp(TEXT)
        async with app.run_test(size=(80, 24)):
            assert app.sub_title == "s snipe  S back  v visual  ; repeat  , reverse"

    @pytest.mark.asyncio
    async def test_key_hint_without_override_mode(self):
        app = SnipeApp(TEXT, settings=SnipeSettings(override_mode=False))
        async with app.run_test(size=(80, 24)):
            assert app.sub_title == "s snipe  S back  v visual"


class TestEditorHooks:
    @pytest.mark.asyncio
    async def test_local_aliases(self):
        app = SnipeApp("xx by ay")
        async with app.run_test(size=(80, 24)) as pilot:
            app.editor.set_local_aliases({"a": "[ab]"})
            await _press(pilot, "f", "a")
            assert app.editor.cursor_location == (0, 3)

    @pytest.mark.asyncio
    async def test_local_aliases_from_constructor(self):
        async with SnipeApp("").run_test(size=(80, 24)):
            editor = SnipeTextArea("xx by ay", local_aliases={"a": "[ab]"})
            assert editor.engine.aliases.resolve("a").pattern == "[ab]"

    @pytest.mark.asyncio
    async def test_operator_scrolls_to_target(self):
        lines = [f"line {n}" for n in range(100)]
        lines[80] = "zq here"
        settings = SnipeSettings(scope=ScopeMode.BUFFER)
        app = SnipeApp("\n".join(lines), settings=settings)
        async with app.run_test(size=(80, 24)) as pilot:
            await _press(pilot, "y", "z", "z", "q")
            await pilot.pause()
            assert app.editor.cursor_location == (0, 0)
            assert app.clipboard.endswith("zq")
            assert app.editor.scroll_offset.y > 60
