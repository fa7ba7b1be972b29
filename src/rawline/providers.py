"""Hint and completion capabilities supplied by the embedding application.

Both are strategy objects. The ``No*`` variants stand in when the
application supplies nothing, so the editor never checks for ``None``.
"""

from __future__ import annotations

from typing import Callable, Protocol, Sequence, Union


class HintsProvider(Protocol):
    """Returns display-only text shown to the right of the buffer."""

    def hint(self, line: str) -> str | None: ...


class CompletionsProvider(Protocol):
    """Returns full-line candidates for the current buffer, possibly none."""

    def complete(self, line: str) -> Sequence[str]: ...


class NoHints:
    def hint(self, line: str) -> str | None:
        return None


class NoCompletions:
    def complete(self, line: str) -> Sequence[str]:
        return ()


class CallbackHints:
    """Adapts a plain ``fn(line) -> str | None`` to :class:`HintsProvider`."""

    def __init__(self, callback: Callable[[str], str | None]) -> None:
        self._callback = callback

    def hint(self, line: str) -> str | None:
        return self._callback(line)


class CallbackCompletions:
    """Adapts a plain ``fn(line) -> list[str]`` to :class:`CompletionsProvider`."""

    def __init__(self, callback: Callable[[str], Sequence[str]]) -> None:
        self._callback = callback

    def complete(self, line: str) -> Sequence[str]:
        return self._callback(line)


HintsLike = Union[HintsProvider, Callable[[str], Union[str, None]], None]
CompletionsLike = Union[CompletionsProvider, Callable[[str], Sequence[str]], None]


def as_hints_provider(value: HintsLike) -> HintsProvider:
    if value is None:
        return NoHints()
    if hasattr(value, "hint"):
        return value  # type: ignore[return-value]
    return CallbackHints(value)  # type: ignore[arg-type]


def as_completions_provider(value: CompletionsLike) -> CompletionsProvider:
    if value is None:
        return NoCompletions()
    if hasattr(value, "complete"):
        return value  # type: ignore[return-value]
    return CallbackCompletions(value)  # type: ignore[arg-type]
