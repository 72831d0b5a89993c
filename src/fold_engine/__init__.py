"""Host-agnostic code editor engine with folding, highlighting and completion."""

from .config import EditorConfig
from .events import EventBus
from .session import EditorSession

__all__ = [
    "EditorConfig",
    "EditorSession",
    "EventBus",
    "adapters",
    "buffer",
    "completion",
    "editing",
    "folding",
    "keymaps",
    "runtime",
    "syntax",
]

__version__ = "0.1.0"
