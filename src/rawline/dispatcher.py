"""Byte-level input state machine driving the edit state.

Each state has one transition function taking the byte just read and
returning either the next :class:`Transition` or :class:`Finished`. Escape
tails and UTF-8 continuations that need one more byte read it inline, so
every read is a plain blocking call on the terminal.

Only the ``ESC [ 3 ~`` (Delete) numeric CSI sequence is recognised; other
numeric tails such as ``ESC [ 1 ~`` and ``ESC [ 4 ~`` are read and ignored.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Union

from rawline import keys
from rawline.errors import EndOfInput, Interrupted, InvalidSequence
from rawline.history import Direction
from rawline.providers import CompletionsProvider
from rawline.state import CompletionSet, EditState
from rawline.terminal import Terminal
from rawline.unicode import decode, sequence_length

logger = logging.getLogger(__name__)


class DispatchState(enum.Enum):
    NORMAL = "normal"
    ESCAPE_SEEN = "escape_seen"
    CSI_SEEN = "csi_seen"
    COMPLETION_BROWSING = "completion_browsing"


@dataclass(frozen=True)
class Transition:
    """Move to *state*; feed *redispatch* to it before reading again."""

    state: DispatchState
    redispatch: int | None = None


@dataclass(frozen=True)
class Finished:
    """The read is over. ``line`` is ``None`` for end of input."""

    line: str | None


Outcome = Union[Transition, Finished]

_NORMAL = Transition(DispatchState.NORMAL)


class InputDispatcher:
    """Reads one line's worth of keys from *terminal* into *state*."""

    def __init__(
        self,
        terminal: Terminal,
        state: EditState,
        completions: CompletionsProvider,
    ) -> None:
        self.terminal = terminal
        self.state = state
        self.history = state.history
        self.completions = completions
        self._browsing: CompletionSet | None = None

        self._handlers: dict[DispatchState, Callable[[int], Outcome]] = {
            DispatchState.NORMAL: self._on_normal,
            DispatchState.ESCAPE_SEEN: self._on_escape,
            DispatchState.CSI_SEEN: self._on_csi,
            DispatchState.COMPLETION_BROWSING: self._on_completion,
        }
        self._control_actions: dict[int, Callable[[], None]] = {
            keys.KEY_CTRL_A: state.move_home,
            keys.KEY_CTRL_B: state.move_left,
            keys.KEY_CTRL_E: state.move_end,
            keys.KEY_CTRL_F: state.move_right,
            keys.KEY_CTRL_K: state.kill_line_forward,
            keys.KEY_CTRL_L: state.clear_screen,
            keys.KEY_CTRL_N: lambda: state.history_navigate(Direction.NEXT),
            keys.KEY_CTRL_P: lambda: state.history_navigate(Direction.PREV),
            keys.KEY_CTRL_T: state.swap_prev,
            keys.KEY_CTRL_U: state.kill_line_backward,
            keys.KEY_CTRL_W: state.delete_prev_word,
            keys.KEY_BACKSPACE: state.backspace,
            keys.KEY_CTRL_H: state.backspace,
        }
        self._csi_actions: dict[int, Callable[[], None]] = {
            ord("A"): lambda: state.history_navigate(Direction.PREV),
            ord("B"): lambda: state.history_navigate(Direction.NEXT),
            ord("C"): state.move_right,
            ord("D"): state.move_left,
            ord("H"): state.move_home,
            ord("F"): state.move_end,
        }

    def run(self) -> str | None:
        """Edit until Enter, Ctrl-D on an empty line, or end of input.

        Raises:
            Interrupted: Ctrl-C was pressed.
        """
        # placeholder entry holding the line being edited
        self.history.add("")
        self.history.current = max(0, len(self.history) - 1)
        self.state.write_prompt()

        state = DispatchState.NORMAL
        pending: int | None = None
        try:
            while True:
                byte = pending if pending is not None else self._read()
                outcome = self._handlers[state](byte)
                if isinstance(outcome, Finished):
                    return outcome.line
                state, pending = outcome.state, outcome.redispatch
        except EndOfInput:
            if self._browsing is not None:
                self.state.cancel_completion(self._browsing)
                self._browsing = None
            return None
        finally:
            self.history.pop()

    def _read(self) -> int:
        byte = self.terminal.read_byte()
        if byte is None:
            raise EndOfInput("input stream closed")
        return byte

    # -- state: Normal ------------------------------------------------------------

    def _on_normal(self, byte: int) -> Outcome:
        action = self._control_actions.get(byte)
        if action is not None:
            action()
            return _NORMAL

        if byte == keys.KEY_NULL:
            return _NORMAL
        if byte == keys.KEY_CTRL_C:
            raise Interrupted()
        if byte == keys.KEY_CTRL_D:
            if self.state.buf:
                self.state.delete()
                return _NORMAL
            return Finished(None)
        if byte == keys.KEY_ENTER:
            self.state.finish()
            return Finished(self.state.buf)
        if byte == keys.KEY_TAB:
            return self._start_completion()
        if byte == keys.KEY_ESC:
            return Transition(DispatchState.ESCAPE_SEEN)
        if keys.is_printable_ascii(byte):
            self.state.insert(chr(byte))
            return _NORMAL
        return self._insert_utf8(byte)

    def _insert_utf8(self, lead: int) -> Outcome:
        try:
            length = sequence_length(lead)
        except InvalidSequence as exc:
            logger.debug("dropping byte: %s", exc)
            return _NORMAL

        data = bytearray((lead,))
        for _ in range(length - 1):
            data.append(self._read())

        try:
            codepoint = decode(bytes(data))
        except InvalidSequence as exc:
            logger.debug("dropping %d-byte sequence: %s", len(data), exc)
            return _NORMAL
        self.state.insert(chr(codepoint))
        return _NORMAL

    def _start_completion(self) -> Outcome:
        completions = self.state.browse_completions(self.completions)
        if completions is None:
            return _NORMAL
        self._browsing = completions
        return Transition(DispatchState.COMPLETION_BROWSING)

    # -- state: EscapeSeen --------------------------------------------------------

    def _on_escape(self, byte: int) -> Outcome:
        if byte == ord("b"):
            self.state.move_word_start()
        elif byte == ord("f"):
            self.state.move_word_end()
        elif byte == ord("["):
            return Transition(DispatchState.CSI_SEEN)
        elif byte == ord("0"):
            final = self._read()
            if final == ord("H"):
                self.state.move_home()
            elif final == ord("F"):
                self.state.move_end()
            else:
                logger.debug("ignoring escape sequence ESC 0 0x%02x", final)
        else:
            logger.debug("ignoring escape sequence ESC 0x%02x", byte)
        return _NORMAL

    # -- state: CSISeen ------------------------------------------------------------

    def _on_csi(self, byte: int) -> Outcome:
        if keys.is_digit(byte):
            final = self._read()
            if byte == ord("3") and final == ord("~"):
                self.state.delete()
            else:
                logger.debug("ignoring CSI sequence %s%s", chr(byte), chr(final))
            return _NORMAL

        action = self._csi_actions.get(byte)
        if action is not None:
            action()
        else:
            logger.debug("ignoring CSI sequence 0x%02x", byte)
        return _NORMAL

    # -- state: CompletionBrowsing --------------------------------------------------

    def _on_completion(self, byte: int) -> Outcome:
        completions = self._browsing
        assert completions is not None

        if byte == keys.KEY_TAB:
            completions.advance()
            self.state.show_completion(completions)
            return Transition(DispatchState.COMPLETION_BROWSING)

        self._browsing = None
        if byte == keys.KEY_ENTER:
            self.state.accept_completion(completions)
        else:
            self.state.cancel_completion(completions)
        logger.debug("completion browsing ended by 0x%02x", byte)
        return Transition(DispatchState.NORMAL, redispatch=byte)
