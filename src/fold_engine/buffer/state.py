"""Selection and suggestion state owned by a single editor instance."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Selection:
    """Selection in display coordinates.

    ``start`` is the anchor and ``end`` the caret, so ``start`` may exceed
    ``end``; ``ordered()`` gives the covered range. ``start == end`` is a
    plain caret.
    """

    start: int = 0
    end: int = 0

    @classmethod
    def caret(cls, offset: int) -> "Selection":
        return cls(offset, offset)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def ordered(self) -> Tuple[int, int]:
        if self.start <= self.end:
            return self.start, self.end
        return self.end, self.start


@dataclass(slots=True)
class SuggestionState:
    """Visible completion list plus the highlighted index."""

    items: list[str] = field(default_factory=list)
    index: int = 0
    word: str = ""
    word_start: int = 0

    @property
    def visible(self) -> bool:
        return bool(self.items)

    @property
    def current(self) -> str | None:
        if not self.items:
            return None
        return self.items[self.index % len(self.items)]

    def clear(self) -> None:
        self.items = []
        self.index = 0
        self.word = ""
        self.word_start = 0

    def move(self, step: int) -> None:
        if not self.items:
            self.index = 0
            return
        self.index = (self.index + step) % len(self.items)
