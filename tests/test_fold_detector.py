from fold_engine.folding import detect_fold_ranges


def test_brace_ranges_nest() -> None:
    lines = ["function f() {", "  if (x) {", "    y();", "  }", "}"]

    assert detect_fold_ranges(lines, "javascript") == {0: 4, 1: 3}


def test_closing_and_opening_on_same_line() -> None:
    lines = ["if (a) {", "  b();", "} else {", "  c();", "}"]

    assert detect_fold_ranges(lines, "js") == {0: 2, 2: 4}


def test_unbalanced_braces_yield_fewer_ranges() -> None:
    assert detect_fold_ranges(["}", "a {"], "javascript") == {}
    assert detect_fold_ranges(["a {", "b {", "}"], "javascript") == {1: 2}


def test_adjacent_lines_fold_but_inline_blocks_do_not() -> None:
    assert detect_fold_ranges(["a {", "}"], "javascript") == {0: 1}
    assert detect_fold_ranges(["a { }"], "javascript") == {}


def test_plaintext_uses_brace_mode() -> None:
    assert detect_fold_ranges(["x {", "y", "}"], "unknown-language") == {0: 2}


def test_html_skips_void_and_self_closing_tags() -> None:
    lines = [
        "<div class='box'>",
        "  <p>hi</p>",
        "  <br>",
        "  <img src='x' />",
        "</div>",
    ]

    assert detect_fold_ranges(lines, "html") == {0: 4}


def test_html_close_matches_innermost_same_name() -> None:
    lines = ["<ul>", "<li>", "</ul>"]

    assert detect_fold_ranges(lines, "html") == {0: 2}


def test_html_nested_same_tags() -> None:
    lines = ["<div>", "  <div>", "  </div>", "</div>"]

    assert detect_fold_ranges(lines, "htm") == {0: 3, 1: 2}
