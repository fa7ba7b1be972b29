"""Public line-reading entry point.

Chooses between the interactive raw-mode editor and a plain delimited read
for pipes and terminals that cannot handle cursor escape sequences.
"""

from __future__ import annotations

import logging

from rawline.config import LineEditorConfig
from rawline.dispatcher import InputDispatcher
from rawline.history import History
from rawline.providers import (
    CompletionsLike,
    HintsLike,
    as_completions_provider,
    as_hints_provider,
)
from rawline.state import EditState
from rawline.terminal import ProcessTerminal, Terminal, is_unsupported_terminal

logger = logging.getLogger(__name__)


class Linenoise:
    """A line editor session: configuration, providers and shared history.

    Example::

        ln = Linenoise(completions=lambda line: ["hello"] if line == "h" else [])
        while (line := ln.read_line("> ")) is not None:
            ln.history.add(line)
    """

    def __init__(
        self,
        config: LineEditorConfig | None = None,
        *,
        hints: HintsLike = None,
        completions: CompletionsLike = None,
        terminal: Terminal | None = None,
    ) -> None:
        self.config = config or LineEditorConfig()
        self.history = History(self.config.history_max_len)
        self.hints = as_hints_provider(hints)
        self.completions = as_completions_provider(completions)
        self.terminal: Terminal = terminal or ProcessTerminal(
            fallback_columns=self.config.fallback_columns
        )

    @property
    def multiline_mode(self) -> bool:
        return self.config.multiline

    @multiline_mode.setter
    def multiline_mode(self, value: bool) -> None:
        self.config.multiline = value

    @property
    def mask_mode(self) -> bool:
        return self.config.mask

    @mask_mode.setter
    def mask_mode(self, value: bool) -> None:
        self.config.mask = value

    def read_line(self, prompt: str) -> str | None:
        """Read one line, with editing when attached to a capable terminal.

        Returns:
            The committed line, or ``None`` at end of input.

        Raises:
            Interrupted: the user pressed Ctrl-C.
        """
        if not self.terminal.isatty():
            return self._read_no_tty()

        if is_unsupported_terminal(denylist=self.config.unsupported_terms):
            logger.warning("terminal does not support line editing, reading plain input")
            self.terminal.write(prompt.encode("utf-8"))
            return self._read_no_tty()

        return self._read_raw(prompt)

    def edit(self, prompt: str) -> str | None:
        """Run the interactive editor on the terminal as it is configured now."""
        state = EditState(self.terminal, prompt, self.history, self.config, self.hints)
        return InputDispatcher(self.terminal, state, self.completions).run()

    def _read_raw(self, prompt: str) -> str | None:
        try:
            with self.terminal.raw_mode():
                return self.edit(prompt)
        finally:
            self.terminal.write(b"\n")

    def _read_no_tty(self) -> str | None:
        """Read bytes up to a newline; ``None`` if the stream is already at its end."""
        logger.debug("reading without line editing")
        data = bytearray()
        while True:
            byte = self.terminal.read_byte()
            if byte is None:
                if not data:
                    return None
                break
            if byte == 0x0A:
                break
            data.append(byte)
        return data.decode("utf-8", errors="replace")
