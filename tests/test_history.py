import pytest

from fold_engine.buffer import History, Selection


def test_past_is_bounded_and_evicts_oldest() -> None:
    history = History(limit=100)

    for index in range(150):
        history.push(str(index), Selection.caret(0))

    assert len(history.past) == 100
    assert history.past[0].text == "50"
    assert history.past[-1].text == "149"


def test_duplicate_push_is_ignored() -> None:
    history = History()

    assert history.push("a", Selection.caret(1))
    assert not history.push("a", Selection.caret(0))
    assert len(history.past) == 1


def test_undo_skips_entry_equal_to_current_text() -> None:
    history = History()
    history.push("", Selection())
    history.push("ab", Selection.caret(2))

    entry = history.undo("ab", Selection.caret(2))

    assert entry is not None
    assert entry.text == ""
    assert [item.text for item in history.future] == ["ab"]


def test_redo_after_undo() -> None:
    history = History()
    history.push("one", Selection.caret(3))

    undone = history.undo("two", Selection.caret(3))
    redone = history.redo("one", Selection.caret(3))

    assert undone is not None and undone.text == "one"
    assert redone is not None and redone.text == "two"
    assert redone.selection == Selection.caret(3)


def test_entries_carry_folded_lines_and_selection_direction() -> None:
    history = History()
    history.push("one", Selection(3, 1), folded=[0, 4])

    undone = history.undo("two", Selection.caret(0), folded=[2])
    redone = history.redo("one", Selection.caret(0))

    assert undone is not None
    assert undone.folded == frozenset({0, 4})
    assert undone.selection == Selection(3, 1)
    assert redone is not None and redone.folded == frozenset({2})


def test_push_clears_future() -> None:
    history = History()
    history.push("one", Selection())
    history.undo("two", Selection())

    history.push("three", Selection())

    assert not history.can_redo()


def test_empty_history_returns_none() -> None:
    history = History()

    assert history.undo("x", Selection()) is None
    assert history.redo("x", Selection()) is None


def test_limit_must_be_positive() -> None:
    with pytest.raises(ValueError):
        History(limit=0)
