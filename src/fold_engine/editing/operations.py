"""Pure edit operations: ``apply_intent(snapshot, intent) -> outcome``.

Every intent arrives in display coordinates. Handlers map the selection onto
the real buffer (expanding folds the selection reaches into), splice, carry
the fold state across the edit, recompute the projection and map the caret
back. Nothing here touches the host, the clipboard or history.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Optional, Type

from fold_engine.buffer.state import Selection
from fold_engine.folding.mapper import (
    RealRange,
    map_display_line_index,
    map_range_to_real,
    map_to_display,
    map_to_real,
)
from fold_engine.folding.projection import FoldState, compute_display
from fold_engine.syntax.languages import VOID_ELEMENTS

from .comments import toggle_comment
from .intents import (
    CopyLine,
    CopySelection,
    CutLine,
    CutSelection,
    DeleteBackward,
    DeleteForward,
    EditIntent,
    EditOutcome,
    EditSnapshot,
    InsertTab,
    InsertText,
    Paste,
    ReplaceRange,
    SetAllFolds,
    ToggleComment,
    ToggleFold,
)

AUTO_CLOSE_PAIRS = {
    "(": ")",
    "[": "]",
    "{": "}",
    '"': '"',
    "'": "'",
    "`": "`",
}

_OPEN_TAG_BEFORE_CARET = re.compile(r"<([A-Za-z][\w:-]*)(?:\s[^<>]*)?>$")

Handler = Callable[[EditSnapshot, EditIntent], EditOutcome]


def apply_intent(snapshot: EditSnapshot, intent: EditIntent) -> EditOutcome:
    handler = _HANDLERS.get(type(intent))
    if handler is None:
        raise TypeError(f"Unsupported edit intent '{type(intent).__name__}'")
    return handler(snapshot, intent)


def replace_real(
    snapshot: EditSnapshot,
    start: int,
    end: int,
    text: str,
    *,
    caret_offset: Optional[int] = None,
    status: str = "ok",
    clipboard: Optional[str] = None,
) -> EditOutcome:
    """Splice ``text`` over real ``[start:end]`` and rebuild derived state.

    The caret lands ``caret_offset`` characters into the inserted text, or at
    its end when omitted.
    """

    before = snapshot.buffer
    after = before.replace(start, end, text)
    folds = snapshot.folds.after_edit(
        before, after, snapshot.language, start=start, end=end
    )
    projection = compute_display(after, folds)
    caret_real = start + (len(text) if caret_offset is None else caret_offset)
    caret = map_to_display(projection, caret_real)
    return EditOutcome(
        buffer=after,
        folds=folds,
        projection=projection,
        selection=Selection.caret(caret),
        changed=True,
        clipboard=clipboard,
        status=status,
    )


def _unchanged(
    snapshot: EditSnapshot,
    *,
    status: str = "noop",
    clipboard: Optional[str] = None,
) -> EditOutcome:
    return EditOutcome(
        buffer=snapshot.buffer,
        folds=snapshot.folds,
        projection=snapshot.projection,
        selection=snapshot.selection,
        clipboard=clipboard,
        status=status,
    )


def _with_folds(snapshot: EditSnapshot, folds: FoldState, status: str) -> EditOutcome:
    if folds == snapshot.folds:
        return _unchanged(snapshot)
    caret_real = map_to_real(
        snapshot.projection, snapshot.selection.ordered()[0], edge="start"
    )
    projection = compute_display(snapshot.buffer, folds)
    caret = map_to_display(projection, caret_real)
    return EditOutcome(
        buffer=snapshot.buffer,
        folds=folds,
        projection=projection,
        selection=Selection.caret(caret),
        status=status,
    )


def _selection_range(snapshot: EditSnapshot) -> RealRange:
    start, end = snapshot.selection.ordered()
    return map_range_to_real(snapshot.projection, start, end)


def _auto_closer(snapshot: EditSnapshot, typed: str, real_start: int) -> str:
    if typed in AUTO_CLOSE_PAIRS:
        return AUTO_CLOSE_PAIRS[typed]
    if typed != ">" or not snapshot.language.is_markup:
        return ""
    buffer = snapshot.buffer
    line_start = buffer.line_start(buffer.line_of(real_start))
    head = buffer.text[line_start:real_start] + typed
    match = _OPEN_TAG_BEFORE_CARET.search(head)
    if match is None or head.endswith("/>"):
        return ""
    name = match.group(1)
    if name.lower() in VOID_ELEMENTS:
        return ""
    return f"</{name}>"


def _insert_text(snapshot: EditSnapshot, intent: InsertText) -> EditOutcome:
    if not intent.text and snapshot.selection.is_empty:
        return _unchanged(snapshot)
    real = _selection_range(snapshot)
    text = intent.text
    caret_offset = None
    if intent.auto_close and len(text) == 1:
        closer = _auto_closer(snapshot, text, real.start)
        if closer:
            caret_offset = len(text)
            text += closer
    status = "auto_close" if caret_offset is not None else "insert"
    return replace_real(
        snapshot, real.start, real.end, text, caret_offset=caret_offset, status=status
    )


def _paste(snapshot: EditSnapshot, intent: Paste) -> EditOutcome:
    if not intent.text and snapshot.selection.is_empty:
        return _unchanged(snapshot)
    real = _selection_range(snapshot)
    return replace_real(snapshot, real.start, real.end, intent.text, status="paste")


def _replace_range(snapshot: EditSnapshot, intent: ReplaceRange) -> EditOutcome:
    real = map_range_to_real(snapshot.projection, intent.start, intent.end)
    return replace_real(snapshot, real.start, real.end, intent.text, status="replace")


def _insert_tab(snapshot: EditSnapshot, intent: InsertTab) -> EditOutcome:
    real = _selection_range(snapshot)
    return replace_real(snapshot, real.start, real.end, intent.text, status="tab")


def _unfold_at_caret(snapshot: EditSnapshot) -> Optional[EditOutcome]:
    projection = snapshot.projection
    line, _ = map_display_line_index(projection, snapshot.selection.start)
    if not projection.is_folded_line(line):
        return None
    folds = snapshot.folds.unfold(projection.real_line(line))
    return _with_folds(snapshot, folds, "unfolded")


def _delete_selection(snapshot: EditSnapshot, status: str) -> EditOutcome:
    real = _selection_range(snapshot)
    if real.is_empty:
        return _unchanged(snapshot)
    return replace_real(snapshot, real.start, real.end, "", status=status)


def _delete_backward(snapshot: EditSnapshot, intent: DeleteBackward) -> EditOutcome:
    del intent
    if not snapshot.selection.is_empty:
        return _delete_selection(snapshot, "delete_selection")
    unfolded = _unfold_at_caret(snapshot)
    if unfolded is not None:
        return unfolded
    caret = map_to_real(snapshot.projection, snapshot.selection.start)
    if caret == 0:
        return _unchanged(snapshot)
    return replace_real(snapshot, caret - 1, caret, "", status="delete_backward")


def _delete_forward(snapshot: EditSnapshot, intent: DeleteForward) -> EditOutcome:
    del intent
    if not snapshot.selection.is_empty:
        return _delete_selection(snapshot, "delete_selection")
    unfolded = _unfold_at_caret(snapshot)
    if unfolded is not None:
        return unfolded
    caret = map_to_real(snapshot.projection, snapshot.selection.start)
    if caret >= snapshot.buffer.length:
        return _unchanged(snapshot)
    return replace_real(snapshot, caret, caret + 1, "", status="delete_forward")


def _clip_range(snapshot: EditSnapshot) -> RealRange:
    start, end = snapshot.selection.ordered()
    if start == 0 and end == snapshot.projection.length:
        return RealRange(0, snapshot.buffer.length)
    return map_range_to_real(snapshot.projection, start, end)


def _copy_selection(snapshot: EditSnapshot, intent: CopySelection) -> EditOutcome:
    if snapshot.selection.is_empty:
        return _copy_line(snapshot, CopyLine())
    real = _clip_range(snapshot)
    text = snapshot.buffer.text[real.start : real.end]
    return _unchanged(snapshot, status="copy", clipboard=text)


def _cut_selection(snapshot: EditSnapshot, intent: CutSelection) -> EditOutcome:
    if snapshot.selection.is_empty:
        return _cut_line(snapshot, CutLine())
    real = _clip_range(snapshot)
    text = snapshot.buffer.text[real.start : real.end]
    return replace_real(snapshot, real.start, real.end, "", status="cut", clipboard=text)


def _current_line_range(snapshot: EditSnapshot) -> RealRange:
    projection = snapshot.projection
    buffer = snapshot.buffer
    display_line, _ = map_display_line_index(projection, snapshot.selection.ordered()[0])
    line = projection.real_line(display_line)
    start = buffer.line_start(line)
    if line + 1 < buffer.line_count:
        return RealRange(start, buffer.line_start(line + 1))
    return RealRange(start, buffer.length)


def _copy_line(snapshot: EditSnapshot, intent: CopyLine) -> EditOutcome:
    del intent
    real = _current_line_range(snapshot)
    text = snapshot.buffer.text[real.start : real.end]
    return _unchanged(snapshot, status="copy_line", clipboard=text)


def _cut_line(snapshot: EditSnapshot, intent: CutLine) -> EditOutcome:
    del intent
    real = _current_line_range(snapshot)
    text = snapshot.buffer.text[real.start : real.end]
    if not text:
        return _unchanged(snapshot, status="cut_line", clipboard=text)
    return replace_real(
        snapshot, real.start, real.end, "", status="cut_line", clipboard=text
    )


def _toggle_comment(snapshot: EditSnapshot, intent: ToggleComment) -> EditOutcome:
    del intent
    projection = snapshot.projection
    buffer = snapshot.buffer
    start, end = snapshot.selection.ordered()
    first, _ = map_display_line_index(projection, start)
    last, last_column = map_display_line_index(projection, end)
    if end > start and last > first and last_column == 0:
        last -= 1

    real_first = projection.real_line(first)
    real_last = projection.fold_end_for(last)
    if real_last is None:
        real_last = projection.real_line(last)
    span_start = buffer.line_start(real_first)
    span_end = buffer.line_end(real_last)

    block = buffer.text[span_start:span_end]
    updated = toggle_comment(block, snapshot.language.comment)
    if updated == block:
        return _unchanged(snapshot)
    outcome = replace_real(snapshot, span_start, span_end, updated, status="comment")
    selection = Selection(
        map_to_display(outcome.projection, span_start),
        map_to_display(outcome.projection, span_start + len(updated)),
    )
    return EditOutcome(
        buffer=outcome.buffer,
        folds=outcome.folds,
        projection=outcome.projection,
        selection=selection,
        changed=True,
        status=outcome.status,
    )


def _toggle_fold(snapshot: EditSnapshot, intent: ToggleFold) -> EditOutcome:
    folds = snapshot.folds.toggle(intent.line)
    status = "folded" if folds.is_folded(intent.line) else "unfolded"
    return _with_folds(snapshot, folds, status)


def _set_all_folds(snapshot: EditSnapshot, intent: SetAllFolds) -> EditOutcome:
    if intent.folded:
        return _with_folds(snapshot, snapshot.folds.fold_all(), "folded")
    return _with_folds(snapshot, snapshot.folds.unfold_all(), "unfolded")


_HANDLERS: Dict[Type[EditIntent], Handler] = {
    InsertText: _insert_text,
    Paste: _paste,
    ReplaceRange: _replace_range,
    InsertTab: _insert_tab,
    DeleteBackward: _delete_backward,
    DeleteForward: _delete_forward,
    CopySelection: _copy_selection,
    CutSelection: _cut_selection,
    CopyLine: _copy_line,
    CutLine: _cut_line,
    ToggleComment: _toggle_comment,
    ToggleFold: _toggle_fold,
    SetAllFolds: _set_all_folds,
}  # type: ignore[dict-item]


__all__ = ["AUTO_CLOSE_PAIRS", "apply_intent", "replace_real"]
