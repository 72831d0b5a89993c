from __future__ import annotations

from typing import Any, Dict, List

from fold_engine.adapters.textual import TextualEditorAdapter, TextualUIHooks
from fold_engine.buffer import Selection
from fold_engine.config import EditorConfig
from fold_engine.editing import MemoryClipboard
from fold_engine.session import EditorSession


class Recorder:
    def __init__(self) -> None:
        self.displays: List[str] = []
        self.overlays: List[list] = []
        self.statuses: List[str] = []
        self.suggestions: List[list] = []
        self.carets: List[Selection] = []
        self.events: List[Dict[str, Any]] = []
        self.logs: List[str] = []

    def hooks(self) -> TextualUIHooks:
        return TextualUIHooks(
            update_display=lambda mirror: self.displays.append(mirror.display_text),
            update_overlay=lambda tokens: self.overlays.append(list(tokens)),
            update_status=self.statuses.append,
            update_suggestions=lambda state: self.suggestions.append(list(state.items)),
            set_caret=self.carets.append,
            handle_event=lambda name, payload: self.events.append(
                {"name": name, "payload": payload}
            ),
            log=self.logs.append,
        )


def make_adapter(text: str = "") -> tuple[TextualEditorAdapter, Recorder]:
    session = EditorSession(
        text,
        config=EditorConfig(use_system_clipboard=False),
        clipboard=MemoryClipboard(),
    )
    recorder = Recorder()
    return TextualEditorAdapter(session, recorder.hooks()), recorder


def test_adapter_renders_initial_state() -> None:
    adapter, recorder = make_adapter("let a = 1;")

    assert recorder.displays == ["let a = 1;"]
    assert recorder.overlays and recorder.overlays[0][0].kind == "keyword"
    assert adapter.process_pending() == Selection.caret(0)


def test_printable_keys_insert_text() -> None:
    adapter, recorder = make_adapter()

    result = adapter.handle_textual_key("a", character="a")

    assert result.consumed
    assert adapter.session.text == "a"
    assert recorder.displays[-1] == "a"
    assert "insert" in recorder.statuses


def test_caret_updates_are_deferred_and_idempotent() -> None:
    adapter, recorder = make_adapter()
    adapter.process_pending()
    recorder.carets.clear()

    adapter.handle_textual_key("x", character="x")
    assert recorder.carets == []

    assert adapter.process_pending() == Selection.caret(1)
    assert adapter.process_pending() is None
    assert recorder.carets == [Selection.caret(1)]


def test_bindings_run_session_commands() -> None:
    adapter, _recorder = make_adapter("ab")
    adapter.set_selection(2)

    adapter.handle_textual_key("backspace")
    assert adapter.session.text == "a"

    result = adapter.handle_textual_key("z", modifiers=["ctrl"])
    assert result.action == "history.undo"
    assert adapter.session.text == "ab"


def test_movement_and_selection_extension() -> None:
    adapter, _recorder = make_adapter("ab\ncd")
    adapter.set_selection(0)

    adapter.handle_textual_key("right")
    adapter.handle_textual_key("down")
    assert adapter.session.selection == Selection.caret(4)

    adapter.handle_textual_key("home")
    assert adapter.session.selection == Selection.caret(3)

    adapter.handle_textual_key("shift+end")
    assert adapter.session.selection == Selection(3, 5)

    adapter.handle_textual_key("left")
    assert adapter.session.selection == Selection.caret(3)

    adapter.handle_textual_key("up")
    assert adapter.session.selection == Selection.caret(0)


def test_extending_backwards_keeps_the_anchor() -> None:
    adapter, _recorder = make_adapter("abcdef")
    adapter.set_selection(5)

    for _ in range(3):
        adapter.handle_textual_key("shift+left")

    assert adapter.session.selection == Selection(5, 2)
    assert adapter.session.selection.ordered() == (2, 5)


def test_extending_upwards_keeps_the_anchor() -> None:
    adapter, _recorder = make_adapter("ab\ncd\nef")
    adapter.set_selection(7)

    adapter.handle_textual_key("shift+up")
    adapter.handle_textual_key("shift+up")
    assert adapter.session.selection == Selection(7, 1)

    adapter.handle_textual_key("left")
    assert adapter.session.selection == Selection.caret(1)


def test_enter_inserts_newline_when_no_suggestions() -> None:
    adapter, _recorder = make_adapter("a")
    adapter.set_selection(1)

    adapter.handle_textual_key("enter")

    assert adapter.session.text == "a\n"


def test_suggestion_keys_navigate_and_accept() -> None:
    adapter, recorder = make_adapter("const counter = 1;\n")
    adapter.set_selection(len(adapter.session.text))

    for char in "cou":
        adapter.handle_textual_key(char, character=char)
    assert recorder.suggestions[-1] == ["counter"]

    result = adapter.handle_textual_key("enter")

    assert result.action == "suggest.accept"
    assert adapter.session.text.endswith("\ncounter")
    assert recorder.suggestions[-1] == []


def test_escape_dismisses_suggestions() -> None:
    adapter, _recorder = make_adapter()
    adapter.handle_textual_key("ctrl+space")
    assert adapter.session.suggestions.visible

    adapter.handle_textual_key("escape")

    assert not adapter.session.suggestions.visible


def test_fold_toggle_key_surfaces_events() -> None:
    adapter, recorder = make_adapter("if (x) {\n  y();\n}\n")

    adapter.handle_textual_key("ctrl+k")

    assert recorder.displays[-1] == "if (x) { ... }\n"
    assert {"name": "folds.changed", "payload": (0,)} in recorder.events


def test_ctrl_letters_without_binding_are_not_inserted() -> None:
    adapter, _recorder = make_adapter()

    result = adapter.handle_textual_key("ctrl+e", character="\x05")

    assert not result.consumed
    assert adapter.session.text == ""


def test_adapter_emits_log_lines() -> None:
    adapter, recorder = make_adapter()

    adapter.handle_textual_key("q", character="q")

    assert any(line.startswith("key ->") for line in recorder.logs)
    assert any(line.startswith("result <-") for line in recorder.logs)
