"""Boundary types exchanged with host editing surfaces, plus engine errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .state import Selection


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot of what the editing surface should show."""

    text: str
    display_text: str
    selection: Selection
    version: int
    language: str
    folded_lines: tuple[int, ...] = ()


class BufferSync(Protocol):
    """How adapters exchange data with a session."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest snapshot the host should render."""
        ...

    def push_host_edit(self, text: str, selection: Selection) -> None:
        """Insert ``text`` over ``selection`` as reported by the host surface."""
        ...


class EngineError(Exception):
    """Base class for errors raised by fold_engine."""


class UnknownLanguageError(EngineError, ValueError):
    """Raised by strict language lookups for ids that are not registered."""

    def __init__(self, language: str) -> None:
        super().__init__(f"Unknown language '{language}'")
        self.language = language


class ClipboardUnavailableError(EngineError):
    """Raised by clipboard backends that cannot read or write."""


class SessionClosedError(EngineError, RuntimeError):
    """Raised when an edit reaches a session after ``close()``."""
