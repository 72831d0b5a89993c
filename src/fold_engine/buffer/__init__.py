"""Buffer, selection and history data structures."""

from .document import TextBuffer
from .history import DEFAULT_HISTORY_LIMIT, History, HistoryEntry
from .state import Selection, SuggestionState
from .sync import (
    BufferMirror,
    BufferSync,
    ClipboardUnavailableError,
    EngineError,
    SessionClosedError,
    UnknownLanguageError,
)
from .validation import clamp_offset, clamp_selection

__all__ = [
    "TextBuffer",
    "History",
    "HistoryEntry",
    "DEFAULT_HISTORY_LIMIT",
    "Selection",
    "SuggestionState",
    "BufferMirror",
    "BufferSync",
    "EngineError",
    "UnknownLanguageError",
    "ClipboardUnavailableError",
    "SessionClosedError",
    "clamp_offset",
    "clamp_selection",
]
