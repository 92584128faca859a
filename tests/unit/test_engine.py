"""Unit tests for the snipe engine against an in-memory host."""

from __future__ import annotations

import pytest

from snipe.config import SnipeSettings
from snipe.engine.document import Document, SearchContext
from snipe.engine.exceptions import NotFound, NothingToRepeat
from snipe.engine.highlight import PRIMARY, SECONDARY
from snipe.engine.motions import MOTIONS, SnipeEngine, define_snipe
from snipe.engine.types import Direction, LastSnipe, ModalState, ScopeMode, Span


class FakeHost:
    """Minimal editor: text, cursor and a viewport of whole rows."""

    def __init__(
        self,
        text: str,
        cursor: int = 0,
        *,
        modal_state: ModalState = ModalState.NORMAL,
        rows: tuple[int, int] | None = None,
    ):
        self.document = Document(text)
        self.cursor = cursor
        self.modal_state = modal_state
        self.rows = rows
        self.prompts: list[str | None] = []
        self.revealed: list[tuple[int, bool]] = []
        self.highlights: dict[int, tuple[Span, str]] = {}
        self._handles = 0

    def snapshot(self) -> SearchContext:
        if self.rows is None:
            viewport = self.document.full_viewport()
        else:
            viewport = self.document.viewport(*self.rows)
        return SearchContext(self.document, self.cursor, viewport, self.modal_state)

    def jump_cursor(self, offset: int) -> None:
        self.cursor = offset

    def reveal(self, offset: int, *, center: bool) -> None:
        self.revealed.append((offset, center))

    def show_prompt(self, text: str | None) -> None:
        self.prompts.append(text)

    def add_highlight(self, span: Span, kind: str, category: str) -> int:
        self._handles += 1
        self.highlights[self._handles] = (span, kind)
        return self._handles

    def remove_highlight(self, handle: int) -> None:
        self.highlights.pop(handle)

    def spans(self, kind: str) -> list[Span]:
        return sorted(
            (span for span, k in self.highlights.values() if k == kind),
            key=lambda span: span.start,
        )


def _keys(text: str):
    return iter(text).__next__


def _engine(text: str, cursor: int = 0, settings: SnipeSettings | None = None, **host_kwargs):
    host = FakeHost(text, cursor, **host_kwargs)
    return host, SnipeEngine(host, settings)


class TestRun:
    def test_two_char_snipe_moves_cursor(self) -> None:
        host, engine = _engine("the quick brown fox")
        assert engine.run("snipe_s", 1, _keys("qu")) == 4
        assert host.cursor == 4

    def test_records_last_snipe(self) -> None:
        _, engine = _engine("the quick brown fox")
        engine.run("snipe_s", 1, _keys("qu"))
        assert engine.last == LastSnipe(1, ("q", "u"), True, 2, ("s", "S"))

    def test_backward_motion_records_negative_count(self) -> None:
        host, engine = _engine("the quick brown fox", 18)
        engine.run("snipe_S", 1, _keys("qu"))
        assert host.cursor == 4
        assert engine.last.count == -1

    def test_count_prefix(self) -> None:
        host, engine = _engine("ab ab ab")
        engine.run("snipe_s", 2, _keys("ab"))
        assert host.cursor == 6

    def test_one_char_exclusive(self) -> None:
        host, engine = _engine("hello world")
        engine.run("snipe_t", 1, _keys("w"))
        assert host.cursor == 5

    def test_failure_leaves_cursor_and_record(self) -> None:
        host, engine = _engine("the quick brown fox", 2)
        with pytest.raises(NotFound, match="Can't find zz"):
            engine.run("snipe_s", 1, _keys("zz"))
        assert host.cursor == 2
        assert engine.last is None

    def test_unknown_motion(self) -> None:
        _, engine = _engine("abc")
        with pytest.raises(KeyError):
            engine.begin("snipe_nope")

    def test_aliases_from_settings(self) -> None:
        host, engine = _engine("call(x)", settings=SnipeSettings(aliases={"[": "[[{(]"}))
        engine.run("snipe_f", 1, _keys("["))
        assert host.cursor == 4

    def test_local_aliases_survive_configure(self) -> None:
        host, engine = _engine("xx by ay")
        engine.aliases.set_local_aliases({"a": "[ab]"})
        engine.configure(SnipeSettings(aliases={"y": "[yz]"}))
        engine.run("snipe_f", 1, _keys("a"))
        assert host.cursor == 3

    def test_spillover_from_settings(self) -> None:
        settings = SnipeSettings(spillover_scope=ScopeMode.BUFFER)
        host, engine = _engine("foo\nbar baz", settings=settings)
        engine.run("snipe_s", 1, _keys("ba"))
        assert host.cursor == 4


class TestCollection:
    def test_prompt_progress(self) -> None:
        host, engine = _engine("the quick brown fox")
        engine.begin("snipe_s")
        engine.feed("q")
        engine.feed("u")
        assert host.prompts == ["2>", "1>q", None]

    def test_prompt_hidden_when_disabled(self) -> None:
        host, engine = _engine("the quick brown fox", settings=SnipeSettings(show_prompt=False))
        engine.run("snipe_s", 1, _keys("qu"))
        assert host.prompts == [None]

    def test_feed_without_collection_is_ignored(self) -> None:
        _, engine = _engine("abc")
        assert engine.feed("a") is None

    def test_abort_restores_state(self) -> None:
        host, engine = _engine("ab ab ab")
        engine.begin("snipe_s")
        engine.feed("a")
        assert host.highlights
        assert engine.feed("escape") is None
        assert not engine.collecting
        assert host.cursor == 0
        assert host.highlights == {}
        assert engine.last is None

    def test_incremental_highlight(self) -> None:
        host, engine = _engine("ab ab ab")
        engine.begin("snipe_s")
        engine.feed("a")
        assert host.spans(SECONDARY) == [Span(3, 4), Span(6, 7)]

    def test_incremental_highlight_disabled(self) -> None:
        host, engine = _engine("ab ab ab", settings=SnipeSettings(incremental_highlight=False))
        engine.begin("snipe_s")
        engine.feed("a")
        assert host.highlights == {}

    def test_confirm_without_keys_repeats(self) -> None:
        host, engine = _engine("ab ab ab")
        engine.run("snipe_s", 1, _keys("ab"))
        engine.begin("snipe_s")
        assert engine.feed("enter") == 6
        assert host.cursor == 6

    def test_confirm_on_backward_motion_reverses(self) -> None:
        host, engine = _engine("ab ab ab")
        engine.run("snipe_s", 2, _keys("ab"))
        engine.begin("snipe_S")
        engine.feed("enter")
        assert host.cursor == 0

    def test_confirm_without_history_raises(self) -> None:
        _, engine = _engine("ab ab ab")
        engine.begin("snipe_s")
        with pytest.raises(NothingToRepeat):
            engine.feed("enter")

    def test_cancel(self) -> None:
        host, engine = _engine("abc")
        engine.begin("snipe_s")
        engine.cancel()
        assert not engine.collecting
        assert host.prompts[-1] is None


class TestHighlights:
    def test_primary_and_secondary_after_jump(self) -> None:
        host, engine = _engine("ab ab ab")
        engine.run("snipe_s", 1, _keys("ab"))
        assert host.spans(PRIMARY) == [Span(3, 5)]
        assert host.spans(SECONDARY) == [Span(6, 8)]

    def test_cleared_on_next_user_action(self) -> None:
        host, engine = _engine("ab ab ab")
        engine.run("snipe_s", 1, _keys("ab"))
        engine.on_user_action()
        assert host.highlights == {}

    def test_disabled(self) -> None:
        host, engine = _engine(
            "ab ab ab", settings=SnipeSettings(highlight=False, incremental_highlight=False)
        )
        engine.run("snipe_s", 1, _keys("ab"))
        assert host.highlights == {}


class TestRepeat:
    def test_repeat_equals_larger_count(self) -> None:
        host, engine = _engine("ab ab ab")
        engine.run("snipe_s", 1, _keys("ab"))
        engine.repeat()

        other_host, other = _engine("ab ab ab")
        other.run("snipe_s", 2, _keys("ab"))
        assert host.cursor == other_host.cursor == 6

    def test_repeat_reverse_goes_back(self) -> None:
        host, engine = _engine("ab ab ab")
        engine.run("snipe_s", 1, _keys("ab"))
        engine.repeat()
        assert engine.repeat_reverse() == 3

    def test_reverse_repeat_matches_backward_snipe(self) -> None:
        host, engine = _engine("ab ab ab ab")
        engine.run("snipe_s", 1, _keys("ab"))
        host.cursor = 8
        engine.repeat_reverse()

        other_host, other = _engine("ab ab ab ab", 8)
        other.run("snipe_S", 1, _keys("ab"))
        assert host.cursor == other_host.cursor == 6

    def test_repeat_does_not_overwrite_record(self) -> None:
        _, engine = _engine("ab ab ab ab")
        engine.run("snipe_s", 1, _keys("ab"))
        engine.repeat(2)
        assert engine.last.count == 1

    def test_repeat_without_history(self) -> None:
        _, engine = _engine("abc")
        with pytest.raises(NothingToRepeat):
            engine.repeat()

    def test_repeat_scope(self) -> None:
        settings = SnipeSettings(repeat_scope=ScopeMode.BUFFER)
        host, engine = _engine("ab ab\nab", settings=settings)
        engine.run("snipe_s", 1, _keys("ab"))
        assert engine.repeat() == 6

    def test_record_survives_configure(self) -> None:
        _, engine = _engine("ab ab")
        engine.run("snipe_s", 1, _keys("ab"))
        engine.configure(SnipeSettings(smart_case=False))
        assert engine.last is not None


class TestTransientKeys:
    def test_same_key_repeats_and_pair_reverses(self) -> None:
        host, engine = _engine("ab ab ab ab")
        engine.run("snipe_s", 1, _keys("ab"))
        assert engine.transient_keys == ("s", "S")
        assert engine.handle_transient_key("s")
        assert host.cursor == 6
        assert engine.handle_transient_key("S")
        assert host.cursor == 3

    def test_other_key_ends_transient_bindings(self) -> None:
        _, engine = _engine("ab ab ab")
        engine.run("snipe_s", 1, _keys("ab"))
        assert engine.handle_transient_key("j") is False
        assert engine.transient_keys == ()
        assert engine.handle_transient_key("s") is False

    def test_failed_repeat_ends_transient_bindings(self) -> None:
        _, engine = _engine("ab ab")
        engine.run("snipe_s", 1, _keys("ab"))
        with pytest.raises(NotFound):
            engine.handle_transient_key("s")
        assert engine.transient_keys == ()

    def test_not_armed_in_operator_state(self) -> None:
        _, engine = _engine("ab ab", modal_state=ModalState.OPERATOR)
        engine.run("snipe_s", 1, _keys("ab"))
        assert engine.transient_keys == ()

    def test_disabled_by_setting(self) -> None:
        _, engine = _engine("ab ab", settings=SnipeSettings(repeat_keys=False))
        engine.run("snipe_s", 1, _keys("ab"))
        assert engine.transient_keys == ()


class TestFollowViewport:
    ROWS = ["....."] * 40

    def _text(self, target_row: int) -> str:
        rows = list(self.ROWS)
        rows[target_row] = "..zq."
        return "\n".join(rows)

    def _jump(self, target_row: int) -> FakeHost:
        settings = SnipeSettings(scope=ScopeMode.BUFFER)
        host, engine = _engine(self._text(target_row), settings=settings, rows=(0, 9))
        engine.run("snipe_s", 1, _keys("zq"))
        return host

    def test_visible_target_does_not_scroll(self) -> None:
        assert self._jump(5).revealed == []

    def test_nearby_target_scrolls_without_centering(self) -> None:
        host = self._jump(11)
        assert host.revealed == [(68, False)]

    def test_distant_target_is_centered(self) -> None:
        host = self._jump(30)
        assert host.revealed == [(182, True)]

    def test_disabled(self) -> None:
        settings = SnipeSettings(scope=ScopeMode.BUFFER, follow_viewport=False)
        host, engine = _engine(self._text(30), settings=settings, rows=(0, 9))
        engine.run("snipe_s", 1, _keys("zq"))
        assert host.revealed == []


class TestDefineSnipe:
    def test_registers_pair(self) -> None:
        try:
            forward, backward = define_snipe("g", "G", 3)
            assert MOTIONS["snipe_g"] is forward
            assert backward.direction is Direction.BACKWARD
            assert (backward.key, backward.reverse_key) == ("G", "g")

            host, engine = _engine("one two three")
            engine.run("snipe_g", 1, _keys("thr"))
            assert host.cursor == 8
        finally:
            MOTIONS.pop("snipe_g", None)
            MOTIONS.pop("snipe_G", None)

    def test_rejects_zero_keys(self) -> None:
        with pytest.raises(ValueError):
            define_snipe("g", "G", 0)

    def test_builtin_motions(self) -> None:
        assert MOTIONS["snipe_s"].key_count == 2
        assert MOTIONS["snipe_x"].consume_match is False
        assert MOTIONS["snipe_F"].direction is Direction.BACKWARD
        assert MOTIONS["snipe_t"].key_count == 1
