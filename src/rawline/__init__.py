"""rawline: readline-style line editing over a raw terminal byte stream."""

from rawline.config import LineEditorConfig
from rawline.dispatcher import DispatchState, InputDispatcher
from rawline.errors import Interrupted, InvalidSequence, RawlineError
from rawline.history import Direction, History
from rawline.linenoise import Linenoise
from rawline.providers import (
    CallbackCompletions,
    CallbackHints,
    CompletionsProvider,
    HintsProvider,
    NoCompletions,
    NoHints,
)
from rawline.state import CompletionSet, EditState
from rawline.terminal import (
    ProcessTerminal,
    Terminal,
    disable_raw_mode,
    enable_raw_mode,
    get_columns,
    is_unsupported_terminal,
    raw_mode,
)

__all__ = [
    # Entry point
    "Linenoise",
    "LineEditorConfig",
    # Errors
    "Interrupted",
    "InvalidSequence",
    "RawlineError",
    # History
    "Direction",
    "History",
    # Providers
    "CallbackCompletions",
    "CallbackHints",
    "CompletionsProvider",
    "HintsProvider",
    "NoCompletions",
    "NoHints",
    # Engine
    "CompletionSet",
    "DispatchState",
    "EditState",
    "InputDispatcher",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    "disable_raw_mode",
    "enable_raw_mode",
    "get_columns",
    "is_unsupported_terminal",
    "raw_mode",
]
