"""Line editor configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_HISTORY_MAX_LEN = 100
DEFAULT_COLUMNS = 80

# Terminals known not to handle the cursor escape sequences used for editing.
UNSUPPORTED_TERMS: tuple[str, ...] = ("dumb", "cons25", "emacs")

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass
class LineEditorConfig:
    """Display and history options for a :class:`~rawline.linenoise.Linenoise`."""

    multiline: bool = False
    mask: bool = False
    mask_char: str = "*"
    history_max_len: int = DEFAULT_HISTORY_MAX_LEN
    fallback_columns: int = DEFAULT_COLUMNS
    unsupported_terms: tuple[str, ...] = UNSUPPORTED_TERMS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> LineEditorConfig:
        """Build a config from ``RAWLINE_*`` environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        config = cls()

        multiline = env.get("RAWLINE_MULTILINE")
        if multiline is not None:
            config.multiline = _parse_bool(multiline)

        mask = env.get("RAWLINE_MASK")
        if mask is not None:
            config.mask = _parse_bool(mask)

        max_len = env.get("RAWLINE_HISTORY_MAX_LEN")
        if max_len is not None:
            try:
                config.history_max_len = max(0, int(max_len))
            except ValueError:
                raise ValueError(
                    f"RAWLINE_HISTORY_MAX_LEN must be an integer, got {max_len!r}"
                ) from None

        return config


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in _TRUTHY
