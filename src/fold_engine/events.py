"""Minimal event bus for session notifications."""

from __future__ import annotations

from typing import Callable, Dict

CONTENT_CHANGED = "content.changed"
SELECTION_CHANGED = "selection.changed"
FOLDS_CHANGED = "folds.changed"
SUGGESTIONS_CHANGED = "suggestions.changed"
CLIPBOARD_ERROR = "clipboard.error"
SESSION_CLOSED = "session.closed"

ALL_EVENTS = (
    CONTENT_CHANGED,
    SELECTION_CHANGED,
    FOLDS_CHANGED,
    SUGGESTIONS_CHANGED,
    CLIPBOARD_ERROR,
    SESSION_CLOSED,
)

Listener = Callable[[object], None]


class EventBus:
    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Listener]] = {}

    def subscribe(self, event: str, callback: Listener) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Listener) -> None:
        listeners = self._subscribers.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


__all__ = [
    "ALL_EVENTS",
    "CLIPBOARD_ERROR",
    "CONTENT_CHANGED",
    "EventBus",
    "FOLDS_CHANGED",
    "Listener",
    "SELECTION_CHANGED",
    "SESSION_CLOSED",
    "SUGGESTIONS_CHANGED",
]
