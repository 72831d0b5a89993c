"""Display-level edit intents and the snapshot/outcome types around them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional

from fold_engine.buffer.document import TextBuffer
from fold_engine.buffer.state import Selection
from fold_engine.buffer.validation import clamp_selection
from fold_engine.folding.projection import DisplayProjection, FoldState, compute_display
from fold_engine.syntax.languages import LanguageSpec, get_language


@dataclass(frozen=True, slots=True)
class EditSnapshot:
    """Everything an edit may read: buffer, folds, language, selection."""

    buffer: TextBuffer
    folds: FoldState
    language: LanguageSpec
    selection: Selection
    projection: DisplayProjection = field(init=False, compare=False)

    def __post_init__(self) -> None:
        projection = compute_display(self.buffer, self.folds)
        object.__setattr__(self, "projection", projection)
        object.__setattr__(
            self, "selection", clamp_selection(self.selection, projection.length)
        )

    @classmethod
    def from_text(
        cls,
        text: str,
        language: str | LanguageSpec | None = None,
        *,
        selection: Selection | None = None,
        folded: tuple[int, ...] = (),
    ) -> "EditSnapshot":
        spec = get_language(language)
        buffer = TextBuffer.from_text(text)
        return cls(
            buffer=buffer,
            folds=FoldState.detect(buffer, spec, folded),
            language=spec,
            selection=selection or Selection(),
        )


@dataclass(frozen=True, slots=True)
class EditOutcome:
    buffer: TextBuffer
    folds: FoldState
    projection: DisplayProjection
    selection: Selection
    changed: bool = False
    clipboard: Optional[str] = None
    status: str = "ok"


@dataclass(frozen=True, slots=True)
class EditIntent:
    kind: ClassVar[str] = "edit"
    # Structural edits snapshot history first; free typing is debounced.
    structural: ClassVar[bool] = True


@dataclass(frozen=True, slots=True)
class InsertText(EditIntent):
    kind: ClassVar[str] = "insert"
    structural: ClassVar[bool] = False

    text: str = ""
    auto_close: bool = True


@dataclass(frozen=True, slots=True)
class Paste(EditIntent):
    kind: ClassVar[str] = "paste"

    text: str = ""


@dataclass(frozen=True, slots=True)
class ReplaceRange(EditIntent):
    """Replace display ``[start:end]``; used when accepting a suggestion."""

    kind: ClassVar[str] = "replace"

    start: int = 0
    end: int = 0
    text: str = ""


@dataclass(frozen=True, slots=True)
class DeleteBackward(EditIntent):
    kind: ClassVar[str] = "delete_backward"
    structural: ClassVar[bool] = False


@dataclass(frozen=True, slots=True)
class DeleteForward(EditIntent):
    kind: ClassVar[str] = "delete_forward"
    structural: ClassVar[bool] = False


@dataclass(frozen=True, slots=True)
class InsertTab(EditIntent):
    kind: ClassVar[str] = "tab"

    text: str = "  "


@dataclass(frozen=True, slots=True)
class CutSelection(EditIntent):
    kind: ClassVar[str] = "cut"


@dataclass(frozen=True, slots=True)
class CopySelection(EditIntent):
    kind: ClassVar[str] = "copy"
    structural: ClassVar[bool] = False


@dataclass(frozen=True, slots=True)
class CutLine(EditIntent):
    kind: ClassVar[str] = "cut_line"


@dataclass(frozen=True, slots=True)
class CopyLine(EditIntent):
    kind: ClassVar[str] = "copy_line"
    structural: ClassVar[bool] = False


@dataclass(frozen=True, slots=True)
class ToggleComment(EditIntent):
    kind: ClassVar[str] = "toggle_comment"


@dataclass(frozen=True, slots=True)
class ToggleFold(EditIntent):
    """Toggle the fold starting at a real line."""

    kind: ClassVar[str] = "toggle_fold"
    structural: ClassVar[bool] = False

    line: int = 0


@dataclass(frozen=True, slots=True)
class SetAllFolds(EditIntent):
    kind: ClassVar[str] = "set_all_folds"
    structural: ClassVar[bool] = False

    folded: bool = True


__all__ = [
    "EditSnapshot",
    "EditOutcome",
    "EditIntent",
    "InsertText",
    "Paste",
    "ReplaceRange",
    "DeleteBackward",
    "DeleteForward",
    "InsertTab",
    "CutSelection",
    "CopySelection",
    "CutLine",
    "CopyLine",
    "ToggleComment",
    "ToggleFold",
    "SetAllFolds",
]
