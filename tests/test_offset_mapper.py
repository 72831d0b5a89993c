from fold_engine.buffer import TextBuffer
from fold_engine.folding import (
    FoldState,
    compute_display,
    map_display_line_index,
    map_range_to_real,
    map_to_display,
    map_to_real,
)

# Real offsets: "if (x) {" 0-8, "  y();" 9-15, "}" 16-17, "z" 18-19.
SOURCE = "if (x) {\n  y();\n}\nz"


def folded_projection():
    buffer = TextBuffer.from_text(SOURCE)
    folds = FoldState.detect(buffer, "javascript", (0,))
    return compute_display(buffer, folds)


def test_display_line_index_clamps() -> None:
    projection = folded_projection()

    assert projection.display_text == "if (x) { ... }\nz"
    assert map_display_line_index(projection, -3) == (0, 0)
    assert map_display_line_index(projection, 15) == (1, 0)
    assert map_display_line_index(projection, 999) == (1, 1)


def test_visible_columns_map_directly() -> None:
    projection = folded_projection()

    assert map_to_real(projection, 3) == 3
    assert map_to_real(projection, 8) == 8
    assert map_to_real(projection, 15) == 18


def test_marker_region_depends_on_edge() -> None:
    projection = folded_projection()

    assert map_to_real(projection, 10, edge="start") == 8
    assert map_to_real(projection, 10, edge="end") == 17
    assert map_to_real(projection, 10) == 17


def test_out_of_range_offsets_clamp() -> None:
    projection = folded_projection()

    assert map_to_real(projection, -5) == 0
    assert map_to_real(projection, 999) == len(SOURCE)


def test_range_over_folded_line_expands_to_hidden_block() -> None:
    projection = folded_projection()

    real = map_range_to_real(projection, 14, 0)

    assert (real.start, real.end) == (0, 17)
    assert not real.is_empty


def test_real_offsets_map_back_to_display() -> None:
    projection = folded_projection()

    assert map_to_display(projection, 4) == 4
    assert map_to_display(projection, 18) == 15
    assert map_to_display(projection, 12) == 14
    assert map_to_display(projection, 17) == 14
    assert map_to_display(projection, 16) == 13


def test_identity_without_folds() -> None:
    buffer = TextBuffer.from_text(SOURCE)
    projection = compute_display(buffer, FoldState.detect(buffer, "javascript"))

    for offset in range(len(SOURCE) + 1):
        assert map_to_real(projection, offset) == offset
        assert map_to_display(projection, offset) == offset
