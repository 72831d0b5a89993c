"""Bounded undo/redo history of (text, selection, folded lines) snapshots."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, List, Optional

from .state import Selection

DEFAULT_HISTORY_LIMIT = 100


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    text: str
    selection_start: int = 0
    selection_end: int = 0
    folded: frozenset[int] = frozenset()

    @classmethod
    def capture(
        cls, text: str, selection: Selection, folded: Iterable[int] = ()
    ) -> "HistoryEntry":
        return cls(
            text=text,
            selection_start=selection.start,
            selection_end=selection.end,
            folded=frozenset(folded),
        )

    @property
    def selection(self) -> Selection:
        return Selection(self.selection_start, self.selection_end)


class History:
    """Linear undo/redo stacks.

    ``past`` is bounded and evicts its oldest entry first; ``future`` is
    cleared by every fresh ``push``.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.limit = limit
        self._past: Deque[HistoryEntry] = deque(maxlen=limit)
        self._future: List[HistoryEntry] = []

    @property
    def past(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._past)

    @property
    def future(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._future)

    def can_undo(self) -> bool:
        return bool(self._past)

    def can_redo(self) -> bool:
        return bool(self._future)

    def push(
        self, text: str, selection: Selection, folded: Iterable[int] = ()
    ) -> bool:
        """Record a snapshot; returns ``False`` when it duplicates the top."""

        if self._past and self._past[-1].text == text:
            return False
        self._past.append(HistoryEntry.capture(text, selection, folded))
        self._future.clear()
        return True

    def undo(
        self, text: str, selection: Selection, folded: Iterable[int] = ()
    ) -> Optional[HistoryEntry]:
        """Step back from the current ``(text, selection, folded)``.

        An entry identical to the current text is skipped while older history
        remains, so an undo never looks like a no-op.
        """

        if not self._past:
            return None
        entry = self._past.pop()
        self._future.append(HistoryEntry.capture(text, selection, folded))
        if entry.text == text and self._past:
            entry = self._past.pop()
        return entry

    def redo(
        self, text: str, selection: Selection, folded: Iterable[int] = ()
    ) -> Optional[HistoryEntry]:
        if not self._future:
            return None
        entry = self._future.pop()
        self._past.append(HistoryEntry.capture(text, selection, folded))
        return entry

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()
