from .reader import (
    PASTE_COMMAND,
    PASTE_HINT,
    PASTE_TERMINATOR,
    QUIT_COMMAND,
    InputMode,
    LineReader,
    LineSource,
    is_quit,
)

__all__ = [
    "PASTE_COMMAND",
    "PASTE_HINT",
    "PASTE_TERMINATOR",
    "QUIT_COMMAND",
    "InputMode",
    "LineReader",
    "LineSource",
    "is_quit",
]
