"""Offset mapping between display and real coordinates.

Everything here is only valid against the projection it is given; callers
recompute the projection after every edit before mapping again. Out-of-range
offsets clamp instead of raising.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Literal

from .projection import FOLD_MARKER, DisplayProjection

Edge = Literal["start", "end", "caret"]


@dataclass(frozen=True, slots=True)
class RealRange:
    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


def map_display_line_index(projection: DisplayProjection, offset: int) -> tuple[int, int]:
    """Return ``(display_line, column)`` owning ``offset``."""

    starts = projection.line_starts()
    if offset <= 0:
        return 0, 0
    line = max(0, bisect_right(starts, offset) - 1)
    column = min(offset - starts[line], len(projection.display_lines[line]))
    return line, column


def map_to_real(
    projection: DisplayProjection, offset: int, *, edge: Edge = "caret"
) -> int:
    """Translate a display offset into the real buffer.

    Inside a folded line, columns past the real start line fall on the fold
    marker. A range ``start`` there maps to the end of the visible start line;
    an ``end`` or bare caret maps past the hidden block, through its end line.
    """

    buffer = projection.buffer
    line, column = map_display_line_index(projection, offset)
    real_line = projection.real_line(line)
    base = buffer.line_start(real_line)
    visible = buffer.line_end(real_line) - base
    fold_end = projection.fold_ends.get(real_line)
    if fold_end is None or column <= visible:
        return base + min(column, visible)
    if edge == "start":
        return base + visible
    return buffer.line_end(fold_end)


def map_range_to_real(projection: DisplayProjection, start: int, end: int) -> RealRange:
    """Map a display selection, expanding any fold its end reaches into."""

    if start > end:
        start, end = end, start
    if start == end:
        caret = map_to_real(projection, start, edge="caret")
        return RealRange(caret, caret)
    return RealRange(
        map_to_real(projection, start, edge="start"),
        map_to_real(projection, end, edge="end"),
    )


def map_to_display(projection: DisplayProjection, real_offset: int) -> int:
    """Translate a real offset back onto the display text.

    Offsets hidden inside a fold land on the folded line: the end line's
    content lines up with the trimmed text after the marker, anything else
    sits at the end of the folded line.
    """

    buffer = projection.buffer
    real_offset = max(0, min(real_offset, buffer.length))
    real_line = buffer.line_of(real_offset)
    column = real_offset - buffer.line_start(real_line)
    display_line = projection.display_line_of(real_line)
    display_start = projection.line_start(display_line)
    shown = projection.display_lines[display_line]
    start_line = projection.real_line(display_line)
    if start_line == real_line:
        return display_start + min(column, len(shown))

    fold_end = projection.fold_ends.get(start_line)
    if fold_end == real_line:
        end_text = buffer.get_line(real_line)
        indent = len(end_text) - len(end_text.lstrip())
        tail = len(buffer.get_line(start_line)) + len(FOLD_MARKER)
        return display_start + min(tail + max(0, column - indent), len(shown))
    return display_start + len(shown)


__all__ = [
    "Edge",
    "RealRange",
    "map_display_line_index",
    "map_range_to_real",
    "map_to_display",
    "map_to_real",
]
