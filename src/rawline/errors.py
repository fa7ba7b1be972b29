"""Exception types raised by the line editor."""

from __future__ import annotations


class RawlineError(Exception):
    """Base class for line editor errors."""


class InvalidSequence(RawlineError, ValueError):
    """A byte sequence is not valid UTF-8 for a single codepoint."""


class Interrupted(KeyboardInterrupt):
    """The user pressed Ctrl-C while a line was being edited."""


class EndOfInput(RawlineError):
    """The input stream closed in the middle of a read.

    Used internally by the dispatcher; ``read_line`` reports it as ``None``.
    """
