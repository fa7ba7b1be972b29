"""Edit buffer, cursor and rendering for one in-progress line."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rawline.config import LineEditorConfig
from rawline.history import Direction, History
from rawline.providers import CompletionsProvider, HintsProvider, NoHints
from rawline.terminal import (
    CLEAR_SCREEN,
    CLEAR_TO_EOL,
    CURSOR_DOWN_FMT,
    CURSOR_FORWARD_FMT,
    CURSOR_UP_FMT,
    Terminal,
)
from rawline.utils import columns_of, is_word_separator, truncate_to_width, visible_width

logger = logging.getLogger(__name__)


@dataclass
class CompletionSet:
    """Candidates being browsed with Tab, plus the line they would replace."""

    candidates: list[str]
    saved_buf: str
    saved_pos: int
    index: int = 0

    @property
    def current(self) -> str:
        return self.candidates[self.index]

    def advance(self) -> None:
        self.index = (self.index + 1) % len(self.candidates)


@dataclass
class _MultilineTracking:
    # rows used by the tallest render so far, and the cursor's column offset
    # (prompt included) at the last render
    max_rows: int = 0
    cursor_cols: int = 0


class EditState:
    """Owns the line under edit and keeps the terminal in sync with it.

    The buffer is a ``str`` so that indexing is by codepoint; ``pos`` is the
    cursor, always within ``0..len(buf)``. Every mutating method redraws.
    """

    def __init__(
        self,
        terminal: Terminal,
        prompt: str,
        history: History,
        config: LineEditorConfig | None = None,
        hints: HintsProvider | None = None,
    ) -> None:
        self.terminal = terminal
        self.prompt = prompt
        self.history = history
        self.config = config or LineEditorConfig()
        self.hints: HintsProvider = hints or NoHints()

        self.buf: str = ""
        self.pos: int = 0

        self._prompt_bytes = prompt.encode("utf-8")
        self._prompt_width = visible_width(prompt)
        self._ml = _MultilineTracking(cursor_cols=self._prompt_width)
        self._hint_shown = False

    def write_prompt(self) -> None:
        self.terminal.write(self._prompt_bytes)

    # -- insertion / deletion -------------------------------------------------

    def insert(self, ch: str) -> None:
        self.buf = self.buf[: self.pos] + ch + self.buf[self.pos :]
        self.pos += 1

        if (
            self.pos == len(self.buf)
            and not self.config.multiline
            and self._prompt_width + columns_of(self._display(self.buf)) < self._columns()
            and self._hint_for(self.buf) is None
            and not self._hint_shown
        ):
            # appended at the end of a line that still fits: echo just the char
            self.terminal.write(self._display(ch).encode("utf-8"))
        else:
            self.refresh()

    def delete(self) -> None:
        """Delete the codepoint under the cursor."""
        if self.pos < len(self.buf):
            self.buf = self.buf[: self.pos] + self.buf[self.pos + 1 :]
            self.refresh()

    def backspace(self) -> None:
        """Delete the codepoint before the cursor."""
        if self.pos > 0:
            self.buf = self.buf[: self.pos - 1] + self.buf[self.pos :]
            self.pos -= 1
            self.refresh()

    def kill_line_forward(self) -> None:
        self.buf = self.buf[: self.pos]
        self.refresh()

    def kill_line_backward(self) -> None:
        self.buf = self.buf[self.pos :]
        self.pos = 0
        self.refresh()

    def delete_prev_word(self) -> None:
        old_pos = self.pos
        self.pos = self._word_start(self.pos)
        self.buf = self.buf[: self.pos] + self.buf[old_pos:]
        self.refresh()

    def swap_prev(self) -> None:
        """Transpose the two codepoints before the cursor and step right."""
        if self.pos < 2:
            return
        chars = list(self.buf)
        chars[self.pos - 2], chars[self.pos - 1] = chars[self.pos - 1], chars[self.pos - 2]
        self.buf = "".join(chars)
        self.pos = min(self.pos + 1, len(self.buf))
        self.refresh()

    # -- cursor movement --------------------------------------------------------

    def move_left(self) -> None:
        if self.pos > 0:
            self.pos -= 1
            self.refresh()

    def move_right(self) -> None:
        if self.pos < len(self.buf):
            self.pos += 1
            self.refresh()

    def move_home(self) -> None:
        if self.pos != 0:
            self.pos = 0
            self.refresh()

    def move_end(self) -> None:
        if self.pos != len(self.buf):
            self.pos = len(self.buf)
            self.refresh()

    def move_word_start(self) -> None:
        self.pos = self._word_start(self.pos)
        self.refresh()

    def move_word_end(self) -> None:
        pos = self.pos
        while pos < len(self.buf) and is_word_separator(self.buf[pos]):
            pos += 1
        while pos < len(self.buf) and not is_word_separator(self.buf[pos]):
            pos += 1
        self.pos = pos
        self.refresh()

    def _word_start(self, pos: int) -> int:
        while pos > 0 and is_word_separator(self.buf[pos - 1]):
            pos -= 1
        while pos > 0 and not is_word_separator(self.buf[pos - 1]):
            pos -= 1
        return pos

    # -- history ---------------------------------------------------------------

    def history_navigate(self, direction: Direction) -> None:
        """Replace the buffer with the previous/next history entry."""
        if len(self.history) <= 1:
            return
        before = self.history.current
        entry = self.history.navigate(direction, self.buf)
        if entry is None or self.history.current == before:
            return
        self.buf = entry
        self.pos = len(entry)
        self.refresh()

    # -- completions ------------------------------------------------------------

    def browse_completions(self, provider: CompletionsProvider) -> CompletionSet | None:
        """Start browsing candidates for the buffer, showing the first one.

        Returns ``None`` (and draws nothing) when there are no candidates.
        """
        candidates = list(provider.complete(self.buf))
        if not candidates:
            return None
        completions = CompletionSet(candidates, saved_buf=self.buf, saved_pos=self.pos)
        logger.debug("browsing %d completions", len(candidates))
        self.show_completion(completions)
        return completions

    def show_completion(self, completions: CompletionSet) -> None:
        """Draw the current candidate without touching the real buffer."""
        candidate = completions.current
        self.refresh(text=candidate, pos=len(candidate))

    def accept_completion(self, completions: CompletionSet) -> None:
        self.buf = completions.current
        self.pos = len(self.buf)
        self.refresh()

    def cancel_completion(self, completions: CompletionSet) -> None:
        self.buf = completions.saved_buf
        self.pos = completions.saved_pos
        self.refresh()

    # -- screen ------------------------------------------------------------------

    def clear_screen(self) -> None:
        self.terminal.write(CLEAR_SCREEN)
        self._ml = _MultilineTracking()
        self.refresh()

    def finish(self) -> None:
        """Leave the final line on screen without hints, cursor at the end."""
        if self.config.multiline:
            self.pos = len(self.buf)
        if self.config.multiline or self._hint_shown:
            self.refresh(show_hints=False)

    # -- rendering -----------------------------------------------------------------

    def refresh(
        self,
        *,
        text: str | None = None,
        pos: int | None = None,
        show_hints: bool = True,
    ) -> None:
        """Redraw the prompt and *text* (default: the buffer) with the cursor at *pos*."""
        if text is None:
            text = self.buf
        if pos is None:
            pos = self.pos
        if self.config.multiline:
            self._refresh_multi_line(text, pos, show_hints)
        else:
            self._refresh_single_line(text, pos, show_hints)

    def _refresh_single_line(self, text: str, pos: int, show_hints: bool) -> None:
        cols = self._columns()
        plen = self._prompt_width
        display = self._display(text)

        # slide the visible window right until the cursor fits, then trim the tail
        start = 0
        while start < pos and plen + columns_of(display[start:pos]) >= cols:
            start += 1
        end = len(display)
        while end > pos and plen + columns_of(display[start:end]) > cols:
            end -= 1
        visible = display[start:end]

        out = bytearray(b"\r")
        out += self._prompt_bytes
        out += visible.encode("utf-8")
        out += self._hint_bytes(text, plen + columns_of(visible), cols, show_hints)
        out += CLEAR_TO_EOL
        out += b"\r"
        cursor_col = plen + columns_of(display[start:pos])
        if cursor_col > 0:
            out += CURSOR_FORWARD_FMT.format(cursor_col).encode()
        self.terminal.write(bytes(out))

    def _refresh_multi_line(self, text: str, pos: int, show_hints: bool) -> None:
        cols = self._columns()
        plen = self._prompt_width
        display = self._display(text)
        total_cols = plen + columns_of(display)

        rows = max(1, (total_cols + cols - 1) // cols)
        old_cursor_row = (self._ml.cursor_cols + cols) // cols
        old_rows = self._ml.max_rows
        self._ml.max_rows = max(self._ml.max_rows, rows)

        out = bytearray()
        # go to the last row used before, then clear every row on the way up
        if old_rows - old_cursor_row > 0:
            out += CURSOR_DOWN_FMT.format(old_rows - old_cursor_row).encode()
        for _ in range(old_rows - 1):
            out += b"\r" + CLEAR_TO_EOL + CURSOR_UP_FMT.format(1).encode()
        out += b"\r" + CLEAR_TO_EOL

        out += self._prompt_bytes
        out += display.encode("utf-8")
        out += self._hint_bytes(text, total_cols, cols, show_hints)

        cursor_cols = plen + columns_of(display[:pos])
        if pos and pos == len(display) and cursor_cols % cols == 0:
            # cursor sits just past the right margin: open the next row
            out += b"\n\r"
            rows += 1
            self._ml.max_rows = max(self._ml.max_rows, rows)

        cursor_row = (cursor_cols + cols) // cols
        if rows - cursor_row > 0:
            out += CURSOR_UP_FMT.format(rows - cursor_row).encode()
        out += b"\r"
        col = cursor_cols % cols
        if col:
            out += CURSOR_FORWARD_FMT.format(col).encode()

        self._ml.cursor_cols = cursor_cols
        self.terminal.write(bytes(out))

    def _hint_bytes(self, text: str, used_cols: int, cols: int, show_hints: bool) -> bytes:
        self._hint_shown = False
        if not show_hints or used_cols >= cols:
            return b""
        hint = self._hint_for(text)
        if not hint:
            return b""
        fitted = truncate_to_width(hint, cols - used_cols)
        if not fitted:
            return b""
        self._hint_shown = True
        return fitted.encode("utf-8")

    def _hint_for(self, text: str) -> str | None:
        if self.config.mask:
            return None
        return self.hints.hint(text)

    def _display(self, text: str) -> str:
        if self.config.mask:
            return self.config.mask_char * len(text)
        return text

    def _columns(self) -> int:
        return max(1, self.terminal.columns)
