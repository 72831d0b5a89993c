"""Fold detection, display projection and offset mapping."""

from .detector import FoldRanges, detect_fold_ranges
from .mapper import (
    RealRange,
    map_display_line_index,
    map_range_to_real,
    map_to_display,
    map_to_real,
)
from .projection import FOLD_MARKER, DisplayProjection, FoldState, compute_display

__all__ = [
    "FoldRanges",
    "detect_fold_ranges",
    "RealRange",
    "map_display_line_index",
    "map_range_to_real",
    "map_to_display",
    "map_to_real",
    "FOLD_MARKER",
    "DisplayProjection",
    "FoldState",
    "compute_display",
]
