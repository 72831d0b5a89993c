"""Language registry and syntax tokenizer."""

from .languages import (
    LANGUAGES,
    PLAINTEXT,
    VOID_ELEMENTS,
    CommentStyle,
    LanguageSpec,
    TokenRule,
    get_language,
    require_language,
)
from .tokenizer import TEXT, Token, escape, highlight, render, tokenize

__all__ = [
    "LANGUAGES",
    "PLAINTEXT",
    "VOID_ELEMENTS",
    "CommentStyle",
    "LanguageSpec",
    "TokenRule",
    "get_language",
    "require_language",
    "TEXT",
    "Token",
    "escape",
    "highlight",
    "render",
    "tokenize",
]
