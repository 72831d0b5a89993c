"""Canonical text storage for an editing session."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import List, Sequence


@dataclass(frozen=True, slots=True)
class TextBuffer:
    """The real text plus a version stamp bumped on every replacement.

    Instances are immutable; ``replace`` returns a new buffer. Lines are split
    on ``"\\n"`` only, so a trailing newline yields a final empty line and
    ``len(lines) == text.count("\\n") + 1`` always holds.
    """

    text: str = ""
    version: int = 0
    _starts: List[int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        starts = [0]
        index = self.text.find("\n")
        while index != -1:
            starts.append(index + 1)
            index = self.text.find("\n", index + 1)
        object.__setattr__(self, "_starts", starts)

    @classmethod
    def from_text(cls, text: str) -> "TextBuffer":
        return cls(text=text, version=0)

    def replace(self, start: int, end: int, text: str) -> "TextBuffer":
        """Return a buffer with ``[start:end]`` replaced by ``text``."""

        if start > end:
            start, end = end, start
        start = max(0, min(start, len(self.text)))
        end = max(0, min(end, len(self.text)))
        updated = self.text[:start] + text + self.text[end:]
        return TextBuffer(text=updated, version=self.version + 1)

    def with_text(self, text: str) -> "TextBuffer":
        return TextBuffer(text=text, version=self.version + 1)

    @property
    def lines(self) -> Sequence[str]:
        return tuple(self.text.split("\n"))

    @property
    def line_count(self) -> int:
        return len(self._starts)

    @property
    def length(self) -> int:
        return len(self.text)

    def line_start(self, line: int) -> int:
        line = max(0, min(line, self.line_count - 1))
        return self._starts[line]

    def line_end(self, line: int) -> int:
        """Offset just before the newline terminating ``line``."""

        line = max(0, min(line, self.line_count - 1))
        if line + 1 < self.line_count:
            return self._starts[line + 1] - 1
        return len(self.text)

    def line_of(self, offset: int) -> int:
        offset = max(0, min(offset, len(self.text)))
        return bisect_right(self._starts, offset) - 1

    def get_line(self, line: int) -> str:
        return self.text[self.line_start(line) : self.line_end(line)]
