"""Textual-facing adapter that wires an EditorSession into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Sequence

from fold_engine.buffer import BufferMirror, Selection, SuggestionState
from fold_engine.events import ALL_EVENTS
from fold_engine.folding.mapper import map_display_line_index
from fold_engine.keymaps import (
    SUGGESTIONS_VISIBLE,
    KeymapRegistry,
    key_to_token,
    load_default_keymaps,
)
from fold_engine.session import EditorSession
from fold_engine.syntax.tokenizer import Token


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_display: Callable[[BufferMirror], None]
    update_overlay: Callable[[Sequence[Token]], None] = _noop
    update_status: Callable[[str], None] = _noop
    update_suggestions: Callable[[SuggestionState], None] = _noop
    set_caret: Callable[[Selection], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


@dataclass(slots=True)
class KeyResult:
    consumed: bool
    action: Optional[str] = None
    status: str = "ok"


_MOVEMENT_KEYS = {"left", "right", "up", "down", "home", "end"}


class TextualEditorAdapter:
    """Bridges an EditorSession and its event bus to a Textual surface.

    Caret updates are queued rather than pushed immediately: the host calls
    ``process_pending`` after its own render pass so the caret lands on the
    freshly rendered text. Calling it twice is harmless.
    """

    def __init__(
        self,
        session: EditorSession,
        hooks: TextualUIHooks,
        *,
        registry: Optional[KeymapRegistry] = None,
    ) -> None:
        self.session = session
        self.hooks = hooks
        self.registry = registry or load_default_keymaps(KeymapRegistry())
        self._pending_caret: Optional[Selection] = None
        self._subscribe_events()
        self.refresh()

    def handle_textual_key(
        self,
        key: str,
        *,
        character: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> KeyResult:
        """Translate a Textual key event into a binding, movement or insert."""

        token = key_to_token(key, modifiers)
        self._log_state("key ->", token=token, character=character)
        result = self._dispatch(token, character)
        self._after_key(result)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            action=result.action,
            status=result.status,
        )
        return result

    def _dispatch(self, token: str, character: Optional[str]) -> KeyResult:
        flags = {SUGGESTIONS_VISIBLE: self.session.suggestions.visible}
        binding = self.registry.dispatch(self.session, token, flags)
        if binding is not None:
            return KeyResult(True, action=binding.action_id, status=binding.action_id)

        base = token.rsplit("+", 1)[-1]
        modifiers = token.split("+")[:-1]
        if token == "ctrl+a":
            self.session.select_all()
            return KeyResult(True, action="select_all", status="select_all")
        if base in _MOVEMENT_KEYS and "ctrl" not in modifiers:
            self.move_caret(base, extend="shift" in modifiers)
            return KeyResult(True, action="move", status=f"move_{base}")
        if token == "enter":
            self.session.type_text("\n")
            return KeyResult(True, action="insert", status="newline")
        if character and len(character) == 1 and character.isprintable():
            if "ctrl" in modifiers or "alt" in modifiers:
                return KeyResult(False, status="unbound")
            self.session.type_text(character)
            return KeyResult(True, action="insert", status="insert")
        return KeyResult(False, status="unbound")

    def move_caret(self, direction: str, *, extend: bool = False) -> Selection:
        """Move the caret in display coordinates, optionally extending."""

        session = self.session
        projection = session.projection
        selection = session.selection
        anchor, head = selection.start, selection.end
        line, column = map_display_line_index(projection, head)
        line_start = projection.line_start(line)
        line_length = len(projection.display_lines[line])

        if direction == "left":
            if not extend and not selection.is_empty:
                target = selection.ordered()[0]
            else:
                target = max(0, head - 1)
        elif direction == "right":
            if not extend and not selection.is_empty:
                target = selection.ordered()[1]
            else:
                target = min(projection.length, head + 1)
        elif direction == "home":
            target = line_start
        elif direction == "end":
            target = line_start + line_length
        elif direction in {"up", "down"}:
            step = -1 if direction == "up" else 1
            row = line + step
            if row < 0:
                target = 0
            elif row >= projection.line_count:
                target = projection.length
            else:
                target = projection.line_start(row) + min(
                    column, len(projection.display_lines[row])
                )
        else:
            raise ValueError(f"Unknown caret direction '{direction}'")

        session.dismiss_suggestions()
        if extend:
            return session.set_selection(anchor, target)
        return session.set_selection(target)

    def set_selection(self, start: int, end: Optional[int] = None) -> Selection:
        selection = self.session.set_selection(start, end)
        self.refresh()
        return selection

    def process_timers(self) -> bool:
        """Drive the session's debounce timer; the host calls this on an interval."""

        fired = self.session.process_timers()
        if fired:
            self._log_state("timer ->", fired=True)
        self.process_pending()
        return fired

    def process_pending(self) -> Optional[Selection]:
        pending = self._pending_caret
        if pending is None:
            return None
        self._pending_caret = None
        self.hooks.set_caret(pending)
        return pending

    def refresh(self) -> None:
        session = self.session
        self.hooks.update_display(session.mirror())
        self.hooks.update_overlay(session.tokens())
        self.hooks.update_suggestions(session.suggestions)
        self._pending_caret = session.selection

    def _after_key(self, result: KeyResult) -> None:
        if result.status:
            self.hooks.update_status(result.status)
        self.refresh()

    def _subscribe_events(self) -> None:
        bus = self.session.bus
        for event in ALL_EVENTS:
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name)
        self.hooks.handle_event(name, payload)
        if name == "clipboard.error" and isinstance(payload, dict):
            self.hooks.update_status(f"clipboard unavailable ({payload.get('operation')})")

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        session = self.session
        selection = session.selection
        return {
            "session": session.name,
            "language": session.language.id,
            "selection": (selection.start, selection.end),
            "folded": session.folded_lines,
            "version": session.version,
            "history_pending": session.history_pending,
        }


__all__ = ["KeyResult", "TextualEditorAdapter", "TextualUIHooks"]
