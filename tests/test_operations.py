import pytest

from fold_engine.buffer import Selection
from fold_engine.editing import (
    CopyLine,
    CopySelection,
    CutLine,
    CutSelection,
    DeleteBackward,
    DeleteForward,
    EditIntent,
    EditSnapshot,
    InsertTab,
    InsertText,
    Paste,
    ReplaceRange,
    SetAllFolds,
    ToggleComment,
    ToggleFold,
    apply_intent,
)

FOLDABLE = "if (x) {\n  y();\n}\n"


def snapshot(
    text: str,
    start: int = 0,
    end: int | None = None,
    *,
    language: str = "javascript",
    folded: tuple[int, ...] = (),
) -> EditSnapshot:
    return EditSnapshot.from_text(
        text,
        language,
        selection=Selection(start, start if end is None else end),
        folded=folded,
    )


def test_auto_close_bracket_places_caret_inside() -> None:
    outcome = apply_intent(snapshot(""), InsertText("("))

    assert outcome.buffer.text == "()"
    assert outcome.selection == Selection.caret(1)
    assert outcome.status == "auto_close"


def test_auto_close_can_be_disabled() -> None:
    outcome = apply_intent(snapshot(""), InsertText("(", auto_close=False))

    assert outcome.buffer.text == "("
    assert outcome.selection == Selection.caret(1)


def test_html_open_tag_gets_closing_tag() -> None:
    outcome = apply_intent(snapshot("<div", 4, language="html"), InsertText(">"))

    assert outcome.buffer.text == "<div></div>"
    assert outcome.selection == Selection.caret(5)


def test_html_void_tag_is_not_closed() -> None:
    outcome = apply_intent(snapshot("<br", 3, language="html"), InsertText(">"))

    assert outcome.buffer.text == "<br>"


def test_insert_replaces_selection() -> None:
    outcome = apply_intent(snapshot("hello world", 0, 5), InsertText("bye"))

    assert outcome.buffer.text == "bye world"
    assert outcome.selection == Selection.caret(3)
    assert outcome.changed


def test_paste_is_inserted_verbatim() -> None:
    outcome = apply_intent(snapshot("ab", 1), Paste("(x"))

    assert outcome.buffer.text == "a(xb"
    assert outcome.selection == Selection.caret(3)


def test_backspace_on_folded_line_unfolds_instead_of_deleting() -> None:
    before = snapshot(FOLDABLE, 14, folded=(0,))
    assert before.projection.display_text == "if (x) { ... }\n"

    outcome = apply_intent(before, DeleteBackward())

    assert outcome.status == "unfolded"
    assert outcome.buffer.text == FOLDABLE
    assert outcome.folds.folded == frozenset()
    assert not outcome.changed


def test_delete_forward_on_folded_line_unfolds() -> None:
    outcome = apply_intent(snapshot(FOLDABLE, 2, folded=(0,)), DeleteForward())

    assert outcome.status == "unfolded"
    assert outcome.buffer.text == FOLDABLE


def test_plain_backspace_and_delete() -> None:
    assert apply_intent(snapshot("abc", 3), DeleteBackward()).buffer.text == "ab"
    assert apply_intent(snapshot("abc", 0), DeleteForward()).buffer.text == "bc"
    assert apply_intent(snapshot("abc", 0), DeleteBackward()).status == "noop"
    assert apply_intent(snapshot("abc", 3), DeleteForward()).status == "noop"


def test_deleting_selection_over_fold_removes_hidden_text() -> None:
    outcome = apply_intent(snapshot(FOLDABLE, 0, 14, folded=(0,)), DeleteBackward())

    assert outcome.buffer.text == "\n"
    assert outcome.folds.folded == frozenset()


def test_typing_in_fold_marker_lands_after_hidden_block() -> None:
    outcome = apply_intent(snapshot(FOLDABLE, 10, folded=(0,)), InsertText("z"))

    assert outcome.buffer.text == "if (x) {\n  y();\n}z\n"
    assert outcome.folds.folded == frozenset({0})
    assert outcome.projection.display_text == "if (x) { ... }z\n"
    assert outcome.selection == Selection.caret(15)


def test_select_all_copy_includes_hidden_text() -> None:
    before = snapshot(FOLDABLE, folded=(0,))
    full = before.projection.length

    outcome = apply_intent(
        snapshot(FOLDABLE, 0, full, folded=(0,)), CopySelection()
    )

    assert outcome.clipboard == FOLDABLE
    assert outcome.buffer.text == FOLDABLE


def test_cut_selection_returns_text() -> None:
    outcome = apply_intent(snapshot("hello world", 5, 11), CutSelection())

    assert outcome.clipboard == " world"
    assert outcome.buffer.text == "hello"


def test_copy_and_cut_fall_back_to_current_line() -> None:
    assert apply_intent(snapshot("a\nb", 0), CopySelection()).clipboard == "a\n"

    outcome = apply_intent(snapshot("a\nb", 0), CutSelection())
    assert outcome.clipboard == "a\n"
    assert outcome.buffer.text == "b"


def test_line_cut_on_last_line() -> None:
    outcome = apply_intent(snapshot("a\nb", 2), CutLine())

    assert outcome.clipboard == "b"
    assert outcome.buffer.text == "a\n"


def test_copy_line_of_folded_line_takes_visible_start_line() -> None:
    outcome = apply_intent(snapshot(FOLDABLE, 3, folded=(0,)), CopyLine())

    assert outcome.clipboard == "if (x) {\n"


def test_comment_round_trip() -> None:
    commented = apply_intent(snapshot("a\nb", 0, 3), ToggleComment())
    assert commented.buffer.text == "// a\n// b"
    assert commented.selection == Selection(0, 9)

    restored = apply_intent(
        EditSnapshot(
            buffer=commented.buffer,
            folds=commented.folds,
            language=snapshot("").language,
            selection=commented.selection,
        ),
        ToggleComment(),
    )
    assert restored.buffer.text == "a\nb"


def test_comment_caret_only_touches_current_line() -> None:
    outcome = apply_intent(snapshot("a\nb", 0), ToggleComment())

    assert outcome.buffer.text == "// a\nb"


def comment(text: str, language: str) -> str:
    return apply_intent(snapshot(text, language=language), ToggleComment()).buffer.text


def test_comment_uses_language_style() -> None:
    assert comment("x", "python") == "# x"
    assert comment("a {}", "css") == "/* a {} */"
    assert comment("<b>", "html") == "<!-- <b> -->"
    assert comment("/* a {} */", "css") == "a {}"


def test_comment_on_folded_line_covers_hidden_block() -> None:
    outcome = apply_intent(snapshot(FOLDABLE, 2, folded=(0,)), ToggleComment())

    assert outcome.buffer.text == "// if (x) {\n//   y();\n// }\n"


def test_tab_inserts_indent_text() -> None:
    outcome = apply_intent(snapshot("a", 0), InsertTab())

    assert outcome.buffer.text == "  a"
    assert outcome.selection == Selection.caret(2)


def test_replace_range_in_display_coordinates() -> None:
    outcome = apply_intent(snapshot("const va", 8), ReplaceRange(6, 8, "value"))

    assert outcome.buffer.text == "const value"
    assert outcome.selection == Selection.caret(11)


def test_fold_toggle_keeps_buffer() -> None:
    outcome = apply_intent(snapshot(FOLDABLE), ToggleFold(0))

    assert outcome.status == "folded"
    assert outcome.buffer.text == FOLDABLE
    assert outcome.projection.display_text == "if (x) { ... }\n"
    assert apply_intent(snapshot(FOLDABLE), ToggleFold(1)).status == "noop"


def test_set_all_folds() -> None:
    folded = apply_intent(snapshot("a {\n  b {\n  }\n}"), SetAllFolds(True))
    assert folded.folds.folded == frozenset({0, 1})

    unfolded = apply_intent(
        snapshot("a {\n  b {\n  }\n}", folded=(0, 1)), SetAllFolds(False)
    )
    assert unfolded.folds.folded == frozenset()


def test_unknown_intent_raises() -> None:
    with pytest.raises(TypeError):
        apply_intent(snapshot(""), EditIntent())


def test_offsets_are_clamped() -> None:
    before = snapshot("abc", 50, -4)

    assert before.selection == Selection(3, 0)
    assert before.selection.ordered() == (0, 3)
    assert apply_intent(before, InsertText("x")).buffer.text == "x"
