"""Foldable range detection over the real buffer.

Brace languages fold from a line ending in ``{`` to the next line starting
with the matching ``}``. HTML folds between an open tag and the innermost
closing tag with the same name. Unbalanced input simply produces fewer ranges.
"""

from __future__ import annotations

import re
from typing import Dict, List, Sequence

from fold_engine.syntax.languages import VOID_ELEMENTS, LanguageSpec, get_language

FoldRanges = Dict[int, int]

_TAG = re.compile(r"<(/?)([A-Za-z][\w:-]*)((?:\"[^\"]*\"|'[^']*'|[^'\">])*?)(/?)>")


def detect_fold_ranges(
    lines: Sequence[str], language: str | LanguageSpec | None
) -> FoldRanges:
    """Map every foldable start line to its end line (``start < end``)."""

    spec = get_language(language)
    if spec.fold_mode == "tag":
        return _detect_tags(lines)
    return _detect_braces(lines)


def _detect_braces(lines: Sequence[str]) -> FoldRanges:
    ranges: FoldRanges = {}
    stack: List[int] = []
    for index, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith("}") and stack:
            start = stack.pop()
            if start < index:
                ranges[start] = index
        if stripped.endswith("{"):
            stack.append(index)
    return ranges


def _detect_tags(lines: Sequence[str]) -> FoldRanges:
    ranges: FoldRanges = {}
    stack: List[tuple[int, str]] = []
    for index, line in enumerate(lines):
        for match in _TAG.finditer(line):
            closing, name, _attrs, self_closing = match.groups()
            name = name.lower()
            if closing:
                _close_tag(stack, ranges, name, index)
            elif not self_closing and name not in VOID_ELEMENTS:
                stack.append((index, name))
    return ranges


def _close_tag(
    stack: List[tuple[int, str]], ranges: FoldRanges, name: str, line: int
) -> None:
    for position in range(len(stack) - 1, -1, -1):
        start, open_name = stack[position]
        if open_name != name:
            continue
        del stack[position]
        if start != line:
            # Several tags opening on one line keep the widest range.
            ranges[start] = max(ranges.get(start, line), line)
        return
