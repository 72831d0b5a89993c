"""Display-level edit intents and the pure operations that apply them."""

from .clipboard import Clipboard, MemoryClipboard, SystemClipboard, default_clipboard
from .comments import toggle_block_comment, toggle_comment, toggle_line_comment
from .intents import (
    CopyLine,
    CopySelection,
    CutLine,
    CutSelection,
    DeleteBackward,
    DeleteForward,
    EditIntent,
    EditOutcome,
    EditSnapshot,
    InsertTab,
    InsertText,
    Paste,
    ReplaceRange,
    SetAllFolds,
    ToggleComment,
    ToggleFold,
)
from .operations import AUTO_CLOSE_PAIRS, apply_intent, replace_real

__all__ = [
    "Clipboard",
    "MemoryClipboard",
    "SystemClipboard",
    "default_clipboard",
    "toggle_comment",
    "toggle_line_comment",
    "toggle_block_comment",
    "EditSnapshot",
    "EditOutcome",
    "EditIntent",
    "InsertText",
    "Paste",
    "ReplaceRange",
    "DeleteBackward",
    "DeleteForward",
    "InsertTab",
    "CutSelection",
    "CopySelection",
    "CutLine",
    "CopyLine",
    "ToggleComment",
    "ToggleFold",
    "SetAllFolds",
    "AUTO_CLOSE_PAIRS",
    "apply_intent",
    "replace_real",
]
