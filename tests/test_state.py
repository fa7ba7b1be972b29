"""Tests for rawline.state.EditState -- edit operations and rendering."""

from __future__ import annotations

import random

from rawline.config import LineEditorConfig
from rawline.history import Direction, History
from rawline.providers import CallbackCompletions, CallbackHints
from rawline.state import CompletionSet, EditState

from .virtual_terminal import VirtualTerminal


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_state(
    text: str = "",
    pos: int | None = None,
    *,
    columns: int = 80,
    prompt: str = "> ",
    config: LineEditorConfig | None = None,
    hints: CallbackHints | None = None,
    history: History | None = None,
) -> tuple[EditState, VirtualTerminal]:
    term = VirtualTerminal(columns=columns)
    state = EditState(term, prompt, history or History(), config, hints)
    state.buf = text
    state.pos = len(text) if pos is None else pos
    return state, term


def hello_hints(line: str) -> str | None:
    return " World" if line == "hello" else None


# ---------------------------------------------------------------------------
# Insertion and deletion
# ---------------------------------------------------------------------------


class TestInsert:
    """insert() places one codepoint at the cursor and advances it."""

    def test_insert_at_end(self) -> None:
        state, _ = make_state("ab")
        state.insert("c")
        assert (state.buf, state.pos) == ("abc", 3)

    def test_insert_in_middle(self) -> None:
        state, _ = make_state("ac", 1)
        state.insert("b")
        assert (state.buf, state.pos) == ("abc", 2)

    def test_append_echoes_only_the_character(self) -> None:
        state, term = make_state()
        state.insert("a")
        assert term.output == b"a"

    def test_append_of_wide_character_echoes_utf8(self) -> None:
        state, term = make_state()
        state.insert("中")
        assert term.output == "中".encode()

    def test_insert_in_middle_redraws_line(self) -> None:
        state, term = make_state("ac", 1)
        state.insert("b")
        assert term.last_write == b"\r> abc\x1b[0K\r\x1b[4C"

    def test_append_that_shows_a_hint_redraws(self) -> None:
        state, term = make_state("hell", hints=CallbackHints(hello_hints))
        state.insert("o")
        assert term.last_write == b"\r> hello World\x1b[0K\r\x1b[7C"

    def test_append_past_the_margin_redraws(self) -> None:
        state, term = make_state("abcdefg", columns=10)
        state.insert("h")
        assert term.last_write.startswith(b"\r")

    def test_insert_then_backspace_restores(self) -> None:
        for pos in range(4):
            state, _ = make_state("abc", pos)
            state.insert("x")
            state.backspace()
            assert (state.buf, state.pos) == ("abc", pos)


class TestDelete:
    def test_backspace_removes_previous(self) -> None:
        state, _ = make_state("abc", 2)
        state.backspace()
        assert (state.buf, state.pos) == ("ac", 1)

    def test_backspace_at_start_is_noop(self) -> None:
        state, term = make_state("abc", 0)
        state.backspace()
        assert (state.buf, state.pos) == ("abc", 0)
        assert term.write_count == 0

    def test_delete_removes_under_cursor(self) -> None:
        state, _ = make_state("abc", 1)
        state.delete()
        assert (state.buf, state.pos) == ("ac", 1)

    def test_delete_at_end_is_noop(self) -> None:
        state, term = make_state("abc")
        state.delete()
        assert state.buf == "abc"
        assert term.write_count == 0

    def test_backspace_removes_whole_codepoint(self) -> None:
        state, _ = make_state("a中")
        state.backspace()
        assert state.buf == "a"


class TestKill:
    def test_kill_line_forward(self) -> None:
        state, _ = make_state("hello world", 5)
        state.kill_line_forward()
        assert (state.buf, state.pos) == ("hello", 5)

    def test_kill_line_backward(self) -> None:
        state, _ = make_state("hello world", 6)
        state.kill_line_backward()
        assert (state.buf, state.pos) == ("world", 0)

    def test_delete_prev_word_collapses_spaces(self) -> None:
        state, _ = make_state("foo bar  ")
        state.delete_prev_word()
        assert (state.buf, state.pos) == ("foo ", 4)

    def test_delete_prev_word_mid_word(self) -> None:
        state, _ = make_state("foo bar", 5)
        state.delete_prev_word()
        assert (state.buf, state.pos) == ("foo ar", 4)

    def test_delete_prev_word_at_start_is_noop(self) -> None:
        state, _ = make_state("foo", 0)
        state.delete_prev_word()
        assert (state.buf, state.pos) == ("foo", 0)


class TestSwapPrev:
    """swap_prev() transposes the two codepoints before the cursor."""

    def test_swap_and_advance(self) -> None:
        state, _ = make_state("abcd", 2)
        state.swap_prev()
        assert (state.buf, state.pos) == ("bacd", 3)

    def test_swap_at_end_keeps_cursor_at_end(self) -> None:
        state, _ = make_state("ab")
        state.swap_prev()
        assert (state.buf, state.pos) == ("ba", 2)

    def test_fewer_than_two_before_cursor_is_noop(self) -> None:
        state, term = make_state("ab", 1)
        state.swap_prev()
        assert (state.buf, state.pos) == ("ab", 1)
        assert term.write_count == 0


# ---------------------------------------------------------------------------
# Cursor movement
# ---------------------------------------------------------------------------


class TestMovement:
    def test_left_and_right(self) -> None:
        state, _ = make_state("abc", 1)
        state.move_left()
        assert state.pos == 0
        state.move_left()
        assert state.pos == 0
        state.move_right()
        assert state.pos == 1

    def test_right_at_end_is_noop(self) -> None:
        state, term = make_state("abc")
        state.move_right()
        assert state.pos == 3
        assert term.write_count == 0

    def test_home_and_end(self) -> None:
        state, _ = make_state("abc", 1)
        state.move_home()
        assert state.pos == 0
        state.move_end()
        assert state.pos == 3


class TestWordMovement:
    """Words are runs of non-space codepoints."""

    def test_word_end_from_start(self) -> None:
        state, _ = make_state("foo bar", 0)
        state.move_word_end()
        assert state.pos == 3

    def test_word_end_skips_leading_spaces(self) -> None:
        state, _ = make_state("foo   bar", 3)
        state.move_word_end()
        assert state.pos == 9

    def test_word_end_from_inside_word(self) -> None:
        state, _ = make_state("foo bar", 1)
        state.move_word_end()
        assert state.pos == 3

    def test_word_end_idempotent_at_end(self) -> None:
        state, _ = make_state("foo bar", 0)
        for _ in range(4):
            state.move_word_end()
        assert state.pos == 7

    def test_word_start(self) -> None:
        state, _ = make_state("foo bar")
        state.move_word_start()
        assert state.pos == 4
        state.move_word_start()
        assert state.pos == 0

    def test_word_start_skips_trailing_spaces(self) -> None:
        state, _ = make_state("foo   ")
        state.move_word_start()
        assert state.pos == 0


class TestCursorInvariant:
    """0 <= pos <= len(buf) after any sequence of edits."""

    def test_random_operations_keep_cursor_in_range(self) -> None:
        rng = random.Random(1234)
        state, _ = make_state()
        operations = [
            lambda: state.insert(rng.choice("ab 中")),
            state.backspace,
            state.delete,
            state.move_left,
            state.move_right,
            state.move_home,
            state.move_end,
            state.move_word_start,
            state.move_word_end,
            state.kill_line_forward,
            state.kill_line_backward,
            state.delete_prev_word,
            state.swap_prev,
        ]
        for _ in range(2000):
            rng.choice(operations)()
            assert 0 <= state.pos <= len(state.buf)


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class TestHistoryNavigation:
    def _history(self) -> History:
        history = History()
        for entry in ("one", "two", ""):
            history.add(entry)
        history.current = 2
        return history

    def test_prev_loads_entry_with_cursor_at_end(self) -> None:
        state, _ = make_state(history=self._history())
        state.history_navigate(Direction.PREV)
        assert (state.buf, state.pos) == ("two", 3)

    def test_draft_is_restored_on_next(self) -> None:
        state, _ = make_state("dr", history=self._history())
        state.history_navigate(Direction.PREV)
        state.history_navigate(Direction.PREV)
        assert state.buf == "one"
        state.history_navigate(Direction.NEXT)
        state.history_navigate(Direction.NEXT)
        assert (state.buf, state.pos) == ("dr", 2)

    def test_next_at_newest_leaves_buffer_alone(self) -> None:
        state, term = make_state("dr", 1, history=self._history())
        state.history_navigate(Direction.NEXT)
        assert (state.buf, state.pos) == ("dr", 1)
        assert term.write_count == 0

    def test_only_placeholder_is_noop(self) -> None:
        history = History()
        history.add("")
        state, term = make_state("x", history=history)
        state.history_navigate(Direction.PREV)
        assert state.buf == "x"
        assert term.write_count == 0


# ---------------------------------------------------------------------------
# Completions
# ---------------------------------------------------------------------------


class TestCompletions:
    """Browsing draws candidates without touching the real buffer."""

    def test_no_candidates(self) -> None:
        state, term = make_state("x")
        assert state.browse_completions(CallbackCompletions(lambda line: [])) is None
        assert term.write_count == 0

    def test_first_candidate_is_shown_not_applied(self) -> None:
        state, term = make_state("he", 1)
        completions = state.browse_completions(CallbackCompletions(lambda line: ["hello", "help"]))
        assert completions is not None
        assert completions.current == "hello"
        assert (state.buf, state.pos) == ("he", 1)
        assert term.last_write == b"\r> hello\x1b[0K\r\x1b[7C"

    def test_accept_replaces_buffer(self) -> None:
        state, _ = make_state("he", 1)
        completions = CompletionSet(["hello", "help"], saved_buf="he", saved_pos=1, index=1)
        state.accept_completion(completions)
        assert (state.buf, state.pos) == ("help", 4)

    def test_cancel_restores_saved_line(self) -> None:
        state, _ = make_state("hello")
        completions = CompletionSet(["hello"], saved_buf="he", saved_pos=1)
        state.cancel_completion(completions)
        assert (state.buf, state.pos) == ("he", 1)

    def test_completion_ring_wraps(self) -> None:
        completions = CompletionSet(["a", "b", "c"], saved_buf="", saved_pos=0)
        seen = []
        for _ in range(4):
            seen.append(completions.current)
            completions.advance()
        assert seen == ["a", "b", "c", "a"]


# ---------------------------------------------------------------------------
# Single-line rendering
# ---------------------------------------------------------------------------


class TestSingleLineRender:
    def test_prompt_buffer_and_cursor(self) -> None:
        state, term = make_state("hi", 1)
        state.refresh()
        assert term.output == b"\r> hi\x1b[0K\r\x1b[3C"

    def test_cursor_at_column_zero_has_no_forward_move(self) -> None:
        state, term = make_state("hi", 0, prompt="")
        state.refresh()
        assert term.output == b"\rhi\x1b[0K\r"

    def test_ansi_prompt_width(self) -> None:
        state, term = make_state("a", prompt="\x1b[32m>\x1b[0m ")
        state.refresh()
        assert term.output.endswith(b"\r\x1b[3C")

    def test_wide_characters_count_two_columns(self) -> None:
        state, term = make_state("中文", 1)
        state.refresh()
        assert term.output == "\r> 中文\x1b[0K\r\x1b[4C".encode()

    def test_scrolls_to_keep_cursor_visible(self) -> None:
        state, term = make_state("abcdefghijkl", columns=10)
        state.refresh()
        assert term.output == b"\r> fghijkl\x1b[0K\r\x1b[9C"

    def test_truncates_tail_when_cursor_at_start(self) -> None:
        state, term = make_state("abcdefghijkl", 0, columns=10)
        state.refresh()
        assert term.output == b"\r> abcdefgh\x1b[0K\r\x1b[2C"

    def test_hint_is_appended(self) -> None:
        state, term = make_state("hello", hints=CallbackHints(hello_hints))
        state.refresh()
        assert term.output == b"\r> hello World\x1b[0K\r\x1b[7C"

    def test_hint_is_truncated_to_width(self) -> None:
        state, term = make_state("hello", columns=10, hints=CallbackHints(hello_hints))
        state.refresh()
        assert term.output == b"\r> hello Wo\x1b[0K\r\x1b[7C"

    def test_mask_mode_hides_text_and_hints(self) -> None:
        state, term = make_state(
            "hello",
            config=LineEditorConfig(mask=True),
            hints=CallbackHints(hello_hints),
        )
        state.refresh()
        assert term.output == b"\r> *****\x1b[0K\r\x1b[7C"
        assert state.buf == "hello"

    def test_custom_mask_char(self) -> None:
        state, term = make_state("ab", config=LineEditorConfig(mask=True, mask_char="#"))
        state.refresh()
        assert b"##" in term.output

    def test_clear_screen_then_redraw(self) -> None:
        state, term = make_state("hi")
        state.clear_screen()
        assert term.output == b"\x1b[H\x1b[2J\r> hi\x1b[0K\r\x1b[4C"

    def test_finish_removes_hint(self) -> None:
        state, term = make_state("hello", hints=CallbackHints(hello_hints))
        state.refresh()
        term.clear_buffer()
        state.finish()
        assert term.output == b"\r> hello\x1b[0K\r\x1b[7C"

    def test_finish_without_hint_writes_nothing(self) -> None:
        state, term = make_state("hi")
        state.finish()
        assert term.write_count == 0


# ---------------------------------------------------------------------------
# Multiline rendering
# ---------------------------------------------------------------------------


class TestMultiLineRender:
    """Wrapped lines clear and rewrite every row they occupy."""

    def _state(self, text: str, pos: int | None = None) -> tuple[EditState, VirtualTerminal]:
        return make_state(text, pos, columns=10, config=LineEditorConfig(multiline=True))

    def test_first_render_spans_two_rows(self) -> None:
        state, term = self._state("abcdefghijkl")
        state.refresh()
        assert term.output == b"\r\x1b[0K> abcdefghijkl\r\x1b[4C"

    def test_rerender_clears_previous_rows(self) -> None:
        state, term = self._state("abcdefghijkl")
        state.refresh()
        term.clear_buffer()
        state.refresh()
        assert term.output == b"\r\x1b[0K\x1b[1A\r\x1b[0K> abcdefghijkl\r\x1b[4C"

    def test_cursor_moves_up_to_its_row(self) -> None:
        state, term = self._state("abcdefghijkl")
        state.refresh()
        term.clear_buffer()
        state.move_home()
        assert term.output == b"\r\x1b[0K\x1b[1A\r\x1b[0K> abcdefghijkl\x1b[1A\r\x1b[2C"

    def test_goes_down_before_clearing_when_cursor_on_upper_row(self) -> None:
        state, term = self._state("abcdefghijkl", 0)
        state.refresh()
        term.clear_buffer()
        state.move_end()
        assert term.output.startswith(b"\x1b[1B\r\x1b[0K\x1b[1A\r\x1b[0K")

    def test_cursor_at_right_margin_opens_next_row(self) -> None:
        state, term = self._state("abcdefgh")
        state.refresh()
        assert term.output == b"\r\x1b[0K> abcdefgh\n\r\r"

    def test_finish_moves_cursor_to_end(self) -> None:
        state, _ = self._state("abcdefghijkl", 0)
        state.finish()
        assert state.pos == len(state.buf)
