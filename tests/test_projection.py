from fold_engine.buffer import TextBuffer
from fold_engine.folding import FOLD_MARKER, FoldState, compute_display

SOURCE = "if (x) {\n  y();\n}\n"


def make_state(text: str, folded: tuple[int, ...] = ()) -> tuple[TextBuffer, FoldState]:
    buffer = TextBuffer.from_text(text)
    return buffer, FoldState.detect(buffer, "javascript", folded)


def test_no_folds_is_identity() -> None:
    text = "a {\n  b\n}\nc"
    buffer, folds = make_state(text)

    projection = compute_display(buffer, folds)

    assert projection.display_text == text
    assert list(projection.display_to_real) == list(range(buffer.line_count))
    assert projection.fold_ends == {}


def test_folded_line_shows_marker_and_trimmed_end() -> None:
    buffer, folds = make_state("  if (x) {\n    y();\n  }\nz", folded=(0,))

    projection = compute_display(buffer, folds)

    assert projection.display_lines[0] == f"  if (x) {{{FOLD_MARKER}}}"
    assert projection.display_text == "  if (x) { ... }\nz"
    assert list(projection.display_to_real) == [0, 3]
    assert projection.is_folded_line(0)
    assert not projection.is_folded_line(1)


def test_toggle_round_trip_restores_display() -> None:
    buffer, folds = make_state(SOURCE)

    folded = folds.toggle(0)
    assert compute_display(buffer, folded).display_text == "if (x) { ... }\n"

    restored = folded.toggle(0)
    assert compute_display(buffer, restored).display_text == SOURCE
    assert restored.folded == frozenset()


def test_toggle_without_range_is_ignored() -> None:
    _buffer, folds = make_state(SOURCE)

    assert folds.toggle(1) is folds


def test_fold_all_and_unfold_all() -> None:
    buffer, folds = make_state("a {\n  b {\n    c\n  }\n}")

    everything = folds.fold_all()
    assert everything.folded == frozenset({0, 1})
    assert compute_display(buffer, everything).display_text == "a { ... }"
    assert everything.unfold_all().folded == frozenset()


def test_detect_prunes_folds_without_ranges() -> None:
    _buffer, folds = make_state("plain\ntext", folded=(0, 5))

    assert folds.folded == frozenset()


def test_after_edit_shifts_folds_below_inserted_lines() -> None:
    before, folds = make_state("a\nif (x) {\n  y();\n}\n", folded=(1,))
    after = before.replace(0, 0, "z\n")

    carried = folds.after_edit(before, after, "javascript", start=0, end=0)

    assert carried.ranges == {2: 4}
    assert carried.folded == frozenset({2})


def test_after_edit_drops_fold_when_hidden_text_changes() -> None:
    before, folds = make_state(SOURCE, folded=(0,))
    after = before.replace(10, 11, "")

    carried = folds.after_edit(before, after, "javascript", start=10, end=11)

    assert carried.folded == frozenset()


def test_after_edit_keeps_fold_for_insert_after_block() -> None:
    before, folds = make_state(SOURCE, folded=(0,))
    after = before.replace(17, 17, "z")

    carried = folds.after_edit(before, after, "javascript", start=17, end=17)

    assert carried.folded == frozenset({0})
