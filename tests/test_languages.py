import pytest

from fold_engine.buffer import EngineError, UnknownLanguageError
from fold_engine.syntax import PLAINTEXT, get_language, require_language


@pytest.mark.parametrize(
    "alias, expected",
    [
        ("js", "javascript"),
        ("JSON", "javascript"),
        ("ts", "typescript"),
        ("py", "python"),
        ("htm", "html"),
        ("css", "css"),
    ],
)
def test_aliases_resolve(alias: str, expected: str) -> None:
    assert get_language(alias).id == expected


def test_unknown_language_falls_back_to_plaintext() -> None:
    assert get_language("cobol") is PLAINTEXT
    assert get_language(None) is PLAINTEXT
    assert PLAINTEXT.fold_mode == "brace"
    assert PLAINTEXT.comment.line == "//"


def test_strict_lookup_raises() -> None:
    with pytest.raises(UnknownLanguageError) as info:
        require_language("cobol")

    assert isinstance(info.value, ValueError)
    assert isinstance(info.value, EngineError)
    assert info.value.language == "cobol"


def test_typescript_extends_javascript_keywords() -> None:
    javascript = set(get_language("javascript").completions)
    typescript = set(get_language("typescript").completions)

    assert javascript < typescript
    assert "interface" in typescript


def test_comment_styles() -> None:
    assert get_language("python").comment.line == "#"
    assert get_language("css").comment.block == ("/*", "*/")
    assert get_language("html").comment.is_block
