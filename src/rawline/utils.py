"""Terminal text utilities: ANSI stripping and display-width measurement."""

from __future__ import annotations

import re

import grapheme
import wcwidth as _wcwidth

# SGR and simple cursor CSI sequences a prompt may carry
_STRIP_RE = re.compile(r"\x1b\[[0-9;]*[mGKHJ]")


# ---------------------------------------------------------------------------
# Width of single units
# ---------------------------------------------------------------------------


def char_width(ch: str) -> int:
    """Return the number of columns one codepoint occupies.

    Control characters and combining marks take no columns; East Asian wide
    and fullwidth characters take two.
    """
    cp = ord(ch)
    if cp < 0x20 or 0x7F <= cp <= 0x9F:
        return 0
    if cp < 0x7F:
        return 1
    return max(_wcwidth.wcwidth(ch), 0)


def _grapheme_width(g: str) -> int:
    if len(g) == 1:
        return char_width(g)
    # Emoji presentation selector or ZWJ sequence
    if "\ufe0f" in g or "\u200d" in g:
        return 2
    return max(_wcwidth.wcswidth(g), char_width(g[0]), 0)


# ---------------------------------------------------------------------------
# Width of strings
# ---------------------------------------------------------------------------


def strip_ansi(text: str) -> str:
    return _STRIP_RE.sub("", text)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*, ignoring ANSI codes."""
    if not text:
        return 0
    stripped = strip_ansi(text)
    if stripped.isascii() and stripped.isprintable():
        return len(stripped)
    return sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))


def columns_of(chars: str) -> int:
    """Sum of :func:`char_width` over each codepoint in *chars*.

    Used for the edit buffer, where the cursor moves by codepoint rather
    than by grapheme cluster.
    """
    return sum(char_width(ch) for ch in chars)


def truncate_to_width(text: str, max_cols: int) -> str:
    """Return the longest prefix of *text* that fits in *max_cols* columns.

    Never splits a grapheme cluster.
    """
    if max_cols <= 0:
        return ""
    used = 0
    parts: list[str] = []
    for g in grapheme.graphemes(text):
        w = _grapheme_width(g)
        if used + w > max_cols:
            break
        parts.append(g)
        used += w
    return "".join(parts)


def is_word_separator(ch: str) -> bool:
    """Word motions treat only the space character as a separator."""
    return ch == " "
