"""Terminal abstraction for raw-mode byte-level interaction.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
implementation over a pair of file descriptors, plus the raw-mode helpers
used by the outermost read call to take and give back control of the tty.
"""

from __future__ import annotations

import contextlib
import logging
import os
import termios
from typing import Iterator, Protocol

from rawline.config import DEFAULT_COLUMNS, UNSUPPORTED_TERMS

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

CLEAR_SCREEN = b"\x1b[H\x1b[2J"
CLEAR_TO_EOL = b"\x1b[0K"
CURSOR_UP_FMT = "\x1b[{}A"
CURSOR_DOWN_FMT = "\x1b[{}B"
CURSOR_FORWARD_FMT = "\x1b[{}C"

# Indices into the list returned by termios.tcgetattr
_IFLAG, _OFLAG, _CFLAG, _LFLAG, _CC = 0, 1, 2, 3, 6


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Byte-oriented terminal I/O used by the dispatcher and edit engine."""

    def read_byte(self) -> int | None:
        """Block until one byte arrives; ``None`` when the stream has ended."""
        ...

    def write(self, data: bytes) -> None: ...

    @property
    def columns(self) -> int: ...

    def isatty(self) -> bool: ...

    def raw_mode(self) -> contextlib.AbstractContextManager[None]:
        """Hold the terminal in raw mode for a ``with`` block."""
        ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by file descriptors (stdin/stdout by default).

    Reads are unbuffered single-byte :func:`os.read` calls so that nothing is
    consumed beyond the key currently being decoded.
    """

    def __init__(
        self,
        stdin_fd: int = 0,
        stdout_fd: int = 1,
        *,
        fallback_columns: int = DEFAULT_COLUMNS,
    ) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._fallback_columns = fallback_columns
        self._write_log_path: str = os.environ.get("RAWLINE_WRITE_LOG", "")

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        return get_columns(self.stdout_fd, self._fallback_columns)

    def isatty(self) -> bool:
        return os.isatty(self.stdin_fd)

    # -- I/O ----------------------------------------------------------------

    def read_byte(self) -> int | None:
        data = os.read(self.stdin_fd, 1)
        if not data:
            return None
        return data[0]

    def write(self, data: bytes) -> None:
        """Write all of *data* and optionally append it to the write log."""
        view = memoryview(data)
        while view:
            written = os.write(self.stdout_fd, view)
            view = view[written:]

        if self._write_log_path:
            try:
                with open(self._write_log_path, "ab") as f:
                    f.write(data)
            except OSError:
                logger.debug("could not append to write log %s", self._write_log_path)

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[None]:
        with raw_mode(self.stdin_fd):
            yield


# ---------------------------------------------------------------------------
# Raw mode
# ---------------------------------------------------------------------------


def enable_raw_mode(fd: int) -> list:
    """Put the tty on *fd* into raw mode and return the previous attributes.

    Echo, canonical line buffering, signal keys and output post-processing
    are all disabled; reads return as soon as a single byte is available.
    """
    original = termios.tcgetattr(fd)
    raw = [list(v) if isinstance(v, list) else v for v in original]

    raw[_IFLAG] &= ~(
        termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON
    )
    raw[_OFLAG] &= ~termios.OPOST
    raw[_CFLAG] |= termios.CS8
    raw[_LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    raw[_CC][termios.VMIN] = 1
    raw[_CC][termios.VTIME] = 0

    termios.tcsetattr(fd, termios.TCSAFLUSH, raw)
    return original


def disable_raw_mode(fd: int, original: list) -> None:
    """Restore the attributes saved by :func:`enable_raw_mode`."""
    termios.tcsetattr(fd, termios.TCSAFLUSH, original)


@contextlib.contextmanager
def raw_mode(fd: int) -> Iterator[None]:
    """Hold the tty in raw mode for the duration of the ``with`` block."""
    original = enable_raw_mode(fd)
    try:
        yield
    finally:
        disable_raw_mode(fd, original)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def get_columns(fd: int = 1, fallback: int = DEFAULT_COLUMNS) -> int:
    """Return the width of the terminal on *fd*, or *fallback* if unknown."""
    try:
        columns = os.get_terminal_size(fd).columns
    except (ValueError, OSError):
        return fallback
    return columns if columns > 0 else fallback


def is_unsupported_terminal(
    term: str | None = None,
    denylist: tuple[str, ...] = UNSUPPORTED_TERMS,
) -> bool:
    """Return ``True`` if *term* (default ``$TERM``) cannot do escape editing."""
    if term is None:
        term = os.environ.get("TERM")
    if not term:
        return False
    return term.lower() in {name.lower() for name in denylist}
