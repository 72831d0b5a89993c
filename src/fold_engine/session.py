"""Per-editor session: the single owner of buffer, folds, history and suggestions.

Hosts never mutate state directly. Each host-facing call builds an edit
intent, runs it through ``operations.apply_intent`` and commits the outcome,
then notifies listeners through the session's event bus.
"""

from __future__ import annotations

import time
from typing import Optional, Sequence

from fold_engine.buffer.document import TextBuffer
from fold_engine.buffer.history import History, HistoryEntry
from fold_engine.buffer.state import Selection, SuggestionState
from fold_engine.buffer.sync import (
    BufferMirror,
    ClipboardUnavailableError,
    SessionClosedError,
)
from fold_engine.completion.suggestions import suggest
from fold_engine.config import EditorConfig
from fold_engine.editing.clipboard import Clipboard, default_clipboard
from fold_engine.editing.intents import (
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
from fold_engine.editing.operations import apply_intent
from fold_engine.events import (
    CLIPBOARD_ERROR,
    CONTENT_CHANGED,
    FOLDS_CHANGED,
    SELECTION_CHANGED,
    SESSION_CLOSED,
    SUGGESTIONS_CHANGED,
    EventBus,
)
from fold_engine.folding.projection import DisplayProjection, FoldState
from fold_engine.runtime import telemetry
from fold_engine.syntax import tokenizer
from fold_engine.syntax.languages import LanguageSpec, get_language
from fold_engine.timers import Clock, DebounceTimer

LOGGER_NAME = "fold_engine.session"


class EditorSession:
    """State object exclusively owned by one editor instance."""

    def __init__(
        self,
        text: str = "",
        *,
        language: str | None = None,
        config: Optional[EditorConfig] = None,
        clipboard: Optional[Clipboard] = None,
        bus: Optional[EventBus] = None,
        clock: Clock = time.monotonic,
        name: str = "default",
    ) -> None:
        self.config = config or EditorConfig()
        self.name = name
        self.bus = bus or EventBus()
        self.clipboard = (
            clipboard
            if clipboard is not None
            else default_clipboard(self.config.use_system_clipboard)
        )
        self.history = History(self.config.history_limit)
        self.suggestions = SuggestionState()
        self._last_clipboard: Optional[str] = None
        self._closed = False
        self._timer = DebounceTimer(self._debounced_snapshot, clock=clock)

        spec = get_language(language or self.config.language)
        buffer = TextBuffer.from_text(text)
        self._snapshot = EditSnapshot(
            buffer=buffer,
            folds=FoldState.detect(buffer, spec),
            language=spec,
            selection=Selection(),
        )
        self.push_state()

    # -- read side ---------------------------------------------------------

    @property
    def snapshot(self) -> EditSnapshot:
        return self._snapshot

    @property
    def text(self) -> str:
        return self._snapshot.buffer.text

    @property
    def version(self) -> int:
        return self._snapshot.buffer.version

    @property
    def projection(self) -> DisplayProjection:
        return self._snapshot.projection

    @property
    def display_text(self) -> str:
        return self._snapshot.projection.display_text

    @property
    def selection(self) -> Selection:
        return self._snapshot.selection

    @property
    def language(self) -> LanguageSpec:
        return self._snapshot.language

    @property
    def folds(self) -> FoldState:
        return self._snapshot.folds

    @property
    def fold_ranges(self) -> dict[int, int]:
        return dict(self._snapshot.folds.ranges)

    @property
    def folded_lines(self) -> tuple[int, ...]:
        return tuple(sorted(self._snapshot.folds.folded))

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def history_pending(self) -> bool:
        return self._timer.armed

    def tokens(self) -> list[tokenizer.Token]:
        return tokenizer.tokenize(self.display_text, self.language)

    def highlight(self) -> str:
        return tokenizer.highlight(self.display_text, self.language)

    def mirror(self) -> BufferMirror:
        return BufferMirror(
            text=self.text,
            display_text=self.display_text,
            selection=self.selection,
            version=self.version,
            language=self.language.id,
            folded_lines=self.folded_lines,
        )

    def pull_buffer(self) -> BufferMirror:
        return self.mirror()

    def push_host_edit(self, text: str, selection: Selection) -> None:
        self.set_selection(selection.start, selection.end)
        self.type_text(text)

    # -- core dispatch -----------------------------------------------------

    def apply(self, intent: EditIntent) -> EditOutcome:
        """Run ``intent`` against the current state and commit the result."""

        self._ensure_open()
        if intent.structural:
            self._timer.cancel()
            self.push_state()

        with telemetry.span(
            f"edit::{intent.kind}",
            logger_name=LOGGER_NAME,
            component="editing",
            metadata={"session": self.name, "version": self.version},
        ) as handle:
            outcome = apply_intent(self._snapshot, intent)
            handle.add_metadata("status", outcome.status)

        self._commit(outcome)
        if outcome.changed and not intent.structural:
            self._timer.arm(self.config.debounce_ms)
        if outcome.clipboard is not None:
            self._write_clipboard(outcome.clipboard)
        return outcome

    def _commit(self, outcome: EditOutcome) -> None:
        previous = self._snapshot
        self._snapshot = EditSnapshot(
            buffer=outcome.buffer,
            folds=outcome.folds,
            language=previous.language,
            selection=outcome.selection,
        )
        self._notify(previous)

    def _notify(self, previous: EditSnapshot) -> None:
        current = self._snapshot
        if current.buffer.text != previous.buffer.text:
            self.bus.emit(CONTENT_CHANGED, current.buffer.text)
        if current.folds.folded != previous.folds.folded:
            self.bus.emit(FOLDS_CHANGED, self.folded_lines)
        if current.selection != previous.selection:
            self.bus.emit(SELECTION_CHANGED, current.selection)

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError(f"Session '{self.name}' is closed")

    # -- selection & text --------------------------------------------------

    def set_selection(self, start: int, end: Optional[int] = None) -> Selection:
        self._ensure_open()
        previous = self._snapshot
        self._snapshot = EditSnapshot(
            buffer=previous.buffer,
            folds=previous.folds,
            language=previous.language,
            selection=Selection(start, start if end is None else end),
        )
        self._notify(previous)
        if self.suggestions.visible:
            self._refresh_suggestions(explicit=False)
        return self.selection

    def select_all(self) -> Selection:
        return self.set_selection(0, self.projection.length)

    def set_text(self, text: str) -> None:
        """Replace the whole buffer, e.g. when the host sets a new value."""

        self._ensure_open()
        if text == self.text:
            return
        self._timer.cancel()
        self.push_state()
        previous = self._snapshot
        buffer = previous.buffer.with_text(text)
        self._snapshot = EditSnapshot(
            buffer=buffer,
            folds=FoldState.detect(buffer, previous.language),
            language=previous.language,
            selection=Selection.caret(0),
        )
        self._dismiss()
        self._notify(previous)

    def set_language(self, language: str) -> LanguageSpec:
        self._ensure_open()
        previous = self._snapshot
        spec = get_language(language)
        self._snapshot = EditSnapshot(
            buffer=previous.buffer,
            folds=FoldState.detect(previous.buffer, spec),
            language=spec,
            selection=previous.selection,
        )
        self._dismiss()
        self._notify(previous)
        return spec

    # -- editing -----------------------------------------------------------

    def type_text(self, text: str) -> EditOutcome:
        outcome = self.apply(InsertText(text=text, auto_close=self.config.auto_close))
        if text.strip():
            self._refresh_suggestions(explicit=False)
        else:
            self._dismiss()
        return outcome

    def paste(self, text: Optional[str] = None) -> Optional[EditOutcome]:
        if text is None:
            text = self._read_clipboard()
        if text is None:
            return None
        outcome = self.apply(Paste(text=text))
        self._dismiss()
        return outcome

    def delete_backward(self) -> EditOutcome:
        outcome = self.apply(DeleteBackward())
        self._after_delete()
        return outcome

    def delete_forward(self) -> EditOutcome:
        outcome = self.apply(DeleteForward())
        self._after_delete()
        return outcome

    def insert_tab(self) -> EditOutcome:
        outcome = self.apply(InsertTab(text=self.config.tab_text))
        self._dismiss()
        return outcome

    def cut(self) -> Optional[str]:
        outcome = self.apply(CutSelection())
        self._dismiss()
        return outcome.clipboard

    def copy(self) -> Optional[str]:
        return self.apply(CopySelection()).clipboard

    def cut_line(self) -> Optional[str]:
        outcome = self.apply(CutLine())
        self._dismiss()
        return outcome.clipboard

    def copy_line(self) -> Optional[str]:
        return self.apply(CopyLine()).clipboard

    def toggle_comment(self) -> EditOutcome:
        outcome = self.apply(ToggleComment())
        self._dismiss()
        return outcome

    # -- folding -----------------------------------------------------------

    def toggle_fold(self, line: int) -> bool:
        """Toggle the fold starting at real ``line``; returns whether it changed."""

        outcome = self.apply(ToggleFold(line=line))
        telemetry.record_event(
            "fold.toggle",
            level="debug",
            data={"line": line, "status": outcome.status},
            logger_name=LOGGER_NAME,
        )
        return outcome.status != "noop"

    def toggle_fold_at_display_line(self, display_line: int) -> bool:
        return self.toggle_fold(self.projection.real_line(display_line))

    def fold_all(self) -> None:
        self.apply(SetAllFolds(folded=True))

    def unfold_all(self) -> None:
        self.apply(SetAllFolds(folded=False))

    # -- history -----------------------------------------------------------

    def push_state(self) -> bool:
        return self.history.push(self.text, self.selection, self.folds.folded)

    def _debounced_snapshot(self) -> None:
        if self.push_state():
            telemetry.record_event(
                "history.snapshot",
                level="debug",
                data={"session": self.name, "depth": len(self.history.past)},
                logger_name=LOGGER_NAME,
            )

    def process_timers(self, now: Optional[float] = None) -> bool:
        return self._timer.process(now)

    def undo(self) -> bool:
        self._ensure_open()
        self._timer.cancel()
        entry = self.history.undo(self.text, self.selection, self.folds.folded)
        if entry is None:
            return False
        self._restore(entry)
        telemetry.record_event(
            "history.undo", level="debug", data={"session": self.name}, logger_name=LOGGER_NAME
        )
        return True

    def redo(self) -> bool:
        self._ensure_open()
        self._timer.cancel()
        entry = self.history.redo(self.text, self.selection, self.folds.folded)
        if entry is None:
            return False
        self._restore(entry)
        telemetry.record_event(
            "history.redo", level="debug", data={"session": self.name}, logger_name=LOGGER_NAME
        )
        return True

    def _restore(self, entry: HistoryEntry) -> None:
        previous = self._snapshot
        buffer = previous.buffer.with_text(entry.text)
        self._snapshot = EditSnapshot(
            buffer=buffer,
            folds=FoldState.detect(buffer, previous.language, entry.folded),
            language=previous.language,
            selection=entry.selection,
        )
        self._dismiss()
        self._notify(previous)

    # -- suggestions -------------------------------------------------------

    def request_suggestions(self) -> Sequence[str]:
        self._ensure_open()
        self._refresh_suggestions(explicit=True)
        return tuple(self.suggestions.items)

    def next_suggestion(self) -> Optional[str]:
        self.suggestions.move(1)
        self.bus.emit(SUGGESTIONS_CHANGED, self.suggestions)
        return self.suggestions.current

    def previous_suggestion(self) -> Optional[str]:
        self.suggestions.move(-1)
        self.bus.emit(SUGGESTIONS_CHANGED, self.suggestions)
        return self.suggestions.current

    def accept_suggestion(self) -> Optional[str]:
        choice = self.suggestions.current
        if choice is None:
            return None
        start = self.suggestions.word_start
        end = self.selection.end
        self.apply(ReplaceRange(start=start, end=end, text=choice))
        self._dismiss()
        return choice

    def dismiss_suggestions(self) -> None:
        self._dismiss()

    def _after_delete(self) -> None:
        if self.suggestions.visible:
            self._refresh_suggestions(explicit=False)

    def _refresh_suggestions(self, *, explicit: bool) -> None:
        selection = self.selection
        if not selection.is_empty:
            self._dismiss()
            return
        word, items = suggest(
            self.display_text,
            selection.start,
            self.language,
            corpus=self.text,
            limit=self.config.max_suggestions,
            explicit=explicit,
        )
        state = self.suggestions
        state.items = items
        state.index = 0
        state.word = word.text
        state.word_start = word.start
        self.bus.emit(SUGGESTIONS_CHANGED, state)

    def _dismiss(self) -> None:
        if not self.suggestions.visible:
            return
        self.suggestions.clear()
        self.bus.emit(SUGGESTIONS_CHANGED, self.suggestions)

    # -- clipboard ---------------------------------------------------------

    def _write_clipboard(self, text: str) -> None:
        self._last_clipboard = text
        try:
            self.clipboard.write(text)
        except ClipboardUnavailableError as exc:
            self._clipboard_failed("write", exc)

    def _read_clipboard(self) -> Optional[str]:
        try:
            return self.clipboard.read()
        except ClipboardUnavailableError as exc:
            self._clipboard_failed("read", exc)
            return self._last_clipboard

    def _clipboard_failed(self, operation: str, exc: Exception) -> None:
        telemetry.record_event(
            "clipboard.error",
            level="warning",
            data={"operation": operation, "reason": str(exc)},
            logger_name=LOGGER_NAME,
        )
        self.bus.emit(CLIPBOARD_ERROR, {"operation": operation, "reason": str(exc)})

    # -- teardown ----------------------------------------------------------

    def close(self) -> None:
        """Flush any pending history snapshot and refuse further edits."""

        if self._closed:
            return
        self._timer.flush()
        self._closed = True
        self.bus.emit(SESSION_CLOSED, self.name)


__all__ = ["EditorSession"]
