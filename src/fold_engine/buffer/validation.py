"""Clamping helpers shared across buffer services."""

from __future__ import annotations

from .state import Selection


def clamp_offset(offset: int, length: int) -> int:
    if offset < 0:
        return 0
    if offset > length:
        return length
    return offset


def clamp_selection(selection: Selection, length: int) -> Selection:
    """Clamp both ends in place; the anchor stays the anchor."""

    return Selection(
        clamp_offset(selection.start, length), clamp_offset(selection.end, length)
    )
