"""Fold state and the display projection derived from it."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping, Sequence

from fold_engine.buffer.document import TextBuffer
from fold_engine.syntax.languages import LanguageSpec

from .detector import FoldRanges, detect_fold_ranges

FOLD_MARKER = " ... "


@dataclass(frozen=True, slots=True)
class FoldState:
    """Detected ranges plus the collapsed subset.

    ``folded`` is kept a subset of ``ranges`` keys by every constructor here.
    Instances are immutable so edit operations can stay pure.
    """

    ranges: Mapping[int, int] = field(default_factory=dict)
    folded: frozenset[int] = frozenset()

    @classmethod
    def detect(
        cls,
        buffer: TextBuffer,
        language: str | LanguageSpec | None,
        folded: Iterable[int] = (),
    ) -> "FoldState":
        ranges = detect_fold_ranges(buffer.lines, language)
        return cls(ranges=ranges, folded=_prune(folded, ranges))

    def is_folded(self, line: int) -> bool:
        return line in self.folded

    def toggle(self, line: int) -> "FoldState":
        if line not in self.ranges:
            return self
        return replace(self, folded=self.folded ^ {line})

    def unfold(self, line: int) -> "FoldState":
        if line not in self.folded:
            return self
        return replace(self, folded=self.folded - {line})

    def fold_all(self) -> "FoldState":
        return replace(self, folded=frozenset(self.ranges))

    def unfold_all(self) -> "FoldState":
        return replace(self, folded=frozenset())

    def after_edit(
        self,
        before: TextBuffer,
        after: TextBuffer,
        language: str | LanguageSpec | None,
        *,
        start: int,
        end: int,
    ) -> "FoldState":
        """Carry folds across a replacement of real ``[start:end]`` in ``before``.

        A fold's hidden span runs from the newline ending its start line to the
        end of its end line. Folds whose hidden span the edit overwrote are
        dropped; folds whose start line begins at or past the edit's end shift
        by the change in line count. Ranges are then re-detected on ``after``.
        """

        line_delta = after.line_count - before.line_count
        kept: list[int] = []
        for line in self.folded:
            last = self.ranges.get(line)
            if last is None:
                continue
            hidden_start = before.line_end(line)
            hidden_end = before.line_end(last)
            if start == end:
                overwritten = hidden_start < start < hidden_end
            else:
                overwritten = start < hidden_end and end > hidden_start
            if overwritten:
                continue
            kept.append(line + line_delta if end <= before.line_start(line) else line)
        return FoldState.detect(after, language, kept)


def _prune(folded: Iterable[int], ranges: Mapping[int, int]) -> frozenset[int]:
    return frozenset(line for line in folded if line in ranges)


@dataclass(frozen=True, slots=True)
class DisplayProjection:
    """User-visible text plus a display-line -> real-line index.

    ``len(display_to_real) == len(display_lines)`` always holds. ``fold_ends``
    holds only folds actually collapsed in this projection, keyed by real
    start line.
    """

    buffer: TextBuffer
    display_lines: Sequence[str]
    display_to_real: Sequence[int]
    fold_ends: Mapping[int, int]
    display_text: str = field(init=False)
    _starts: Sequence[int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "display_text", "\n".join(self.display_lines))
        starts = []
        running = 0
        for line in self.display_lines:
            starts.append(running)
            running += len(line) + 1
        object.__setattr__(self, "_starts", tuple(starts))

    @property
    def length(self) -> int:
        return len(self.display_text)

    @property
    def line_count(self) -> int:
        return len(self.display_lines)

    def line_start(self, display_line: int) -> int:
        display_line = max(0, min(display_line, self.line_count - 1))
        return self._starts[display_line]

    def line_starts(self) -> Sequence[int]:
        return self._starts

    def real_line(self, display_line: int) -> int:
        display_line = max(0, min(display_line, self.line_count - 1))
        return self.display_to_real[display_line]

    def display_line_of(self, real_line: int) -> int:
        """Display line showing ``real_line``, or the folded line hiding it."""

        index = bisect_right(self.display_to_real, real_line) - 1
        return max(0, min(index, self.line_count - 1))

    def fold_end_for(self, display_line: int) -> int | None:
        return self.fold_ends.get(self.real_line(display_line))

    def is_folded_line(self, display_line: int) -> bool:
        return self.fold_end_for(display_line) is not None


def compute_display(buffer: TextBuffer, folds: FoldState) -> DisplayProjection:
    """Collapse every folded range into ``"<start> ... <trimmed end>"``."""

    lines = buffer.lines
    shown: list[str] = []
    mapping: list[int] = []
    applied: dict[int, int] = {}
    index = 0
    total = len(lines)
    while index < total:
        end = folds.ranges.get(index) if index in folds.folded else None
        if end is not None and index < end < total:
            shown.append(f"{lines[index]}{FOLD_MARKER}{lines[end].strip()}")
            mapping.append(index)
            applied[index] = end
            index = end + 1
            continue
        shown.append(lines[index])
        mapping.append(index)
        index += 1
    return DisplayProjection(
        buffer=buffer,
        display_lines=tuple(shown),
        display_to_real=tuple(mapping),
        fold_ends=applied,
    )


__all__ = [
    "FOLD_MARKER",
    "DisplayProjection",
    "FoldRanges",
    "FoldState",
    "compute_display",
]
