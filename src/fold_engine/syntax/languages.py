"""Per-language behaviour: folding mode, comment style, token rules, completions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping, Optional, Pattern

from fold_engine.buffer.sync import UnknownLanguageError

FoldMode = Literal["brace", "tag"]

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)


@dataclass(frozen=True, slots=True)
class TokenRule:
    kind: str
    pattern: Pattern[str]


@dataclass(frozen=True, slots=True)
class CommentStyle:
    """Either a line prefix or a ``(open, close)`` block pair."""

    line: Optional[str] = None
    block: Optional[tuple[str, str]] = None

    @property
    def is_block(self) -> bool:
        return self.block is not None


@dataclass(frozen=True, slots=True)
class LanguageSpec:
    id: str
    aliases: tuple[str, ...]
    fold_mode: FoldMode
    comment: CommentStyle
    rules: tuple[TokenRule, ...]
    completions: tuple[str, ...] = ()
    scrape_identifiers: bool = False
    word_chars: str = r"[\w$]"

    @property
    def is_markup(self) -> bool:
        return self.fold_mode == "tag"


def _rule(kind: str, pattern: str) -> TokenRule:
    return TokenRule(kind=kind, pattern=re.compile(pattern))


def _keyword_rule(words: tuple[str, ...]) -> TokenRule:
    return _rule("keyword", r"\b(?:" + "|".join(words) + r")\b")


JS_KEYWORDS: tuple[str, ...] = (
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "debugger",
    "default",
    "delete",
    "do",
    "else",
    "export",
    "extends",
    "finally",
    "for",
    "function",
    "if",
    "import",
    "in",
    "instanceof",
    "new",
    "return",
    "super",
    "switch",
    "this",
    "throw",
    "try",
    "typeof",
    "var",
    "void",
    "while",
    "with",
    "let",
    "static",
    "yield",
    "async",
    "await",
    "true",
    "false",
    "null",
    "undefined",
)

TS_KEYWORDS: tuple[str, ...] = JS_KEYWORDS + (
    "interface",
    "type",
    "enum",
    "implements",
    "private",
    "protected",
    "public",
    "readonly",
    "declare",
    "namespace",
    "abstract",
    "as",
    "keyof",
    "any",
    "unknown",
    "never",
)

PY_KEYWORDS: tuple[str, ...] = (
    "False",
    "None",
    "True",
    "and",
    "as",
    "assert",
    "async",
    "await",
    "break",
    "class",
    "continue",
    "def",
    "del",
    "elif",
    "else",
    "except",
    "finally",
    "for",
    "from",
    "global",
    "if",
    "import",
    "in",
    "is",
    "lambda",
    "nonlocal",
    "not",
    "or",
    "pass",
    "raise",
    "return",
    "try",
    "while",
    "with",
    "yield",
)

HTML_TAGS: tuple[str, ...] = (
    "a",
    "abbr",
    "article",
    "aside",
    "audio",
    "body",
    "button",
    "canvas",
    "code",
    "div",
    "footer",
    "form",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "head",
    "header",
    "html",
    "iframe",
    "img",
    "input",
    "label",
    "li",
    "link",
    "main",
    "meta",
    "nav",
    "ol",
    "option",
    "p",
    "pre",
    "script",
    "section",
    "select",
    "span",
    "strong",
    "style",
    "table",
    "tbody",
    "td",
    "textarea",
    "th",
    "thead",
    "title",
    "tr",
    "ul",
    "video",
)

CSS_PROPERTIES: tuple[str, ...] = (
    "align-items",
    "animation",
    "background",
    "background-color",
    "border",
    "border-radius",
    "bottom",
    "box-shadow",
    "box-sizing",
    "color",
    "cursor",
    "display",
    "flex",
    "flex-direction",
    "font-family",
    "font-size",
    "font-weight",
    "gap",
    "grid-template-columns",
    "height",
    "justify-content",
    "left",
    "line-height",
    "margin",
    "max-width",
    "min-height",
    "opacity",
    "overflow",
    "padding",
    "position",
    "right",
    "text-align",
    "top",
    "transform",
    "transition",
    "width",
    "z-index",
)

_C_COMMENT = r"//[^\n]*|/\*[\s\S]*?\*/"
_QUOTED = r'"[\s\S]*?"|\'[\s\S]*?\''
_NUMBER = r"\b\d+(?:\.\d+)?\b"

JS_RULES: tuple[TokenRule, ...] = (
    _rule("comment", _C_COMMENT),
    _rule("string", _QUOTED + r"|`[\s\S]*?`"),
    _keyword_rule(JS_KEYWORDS),
    _rule("number", _NUMBER),
    _rule("operator", r"[+\-*/%=<>&|!?:.,;{}\[\]()]"),
)

TS_RULES: tuple[TokenRule, ...] = (
    JS_RULES[0],
    JS_RULES[1],
    _keyword_rule(TS_KEYWORDS),
    JS_RULES[3],
    JS_RULES[4],
)

CSS_RULES: tuple[TokenRule, ...] = (
    _rule("comment", r"/\*[\s\S]*?\*/"),
    _rule("keyword", r"@[\w-]+"),
    _rule("string", _QUOTED),
    _rule("tag", r"[.#]?[\w-]+(?=\s*\{)"),
    _rule("attribute", r"[\w-]+(?=\s*:)"),
    _rule("number", r"(?:\d+\.?\d*|\.\d+)(?:px|rem|em|%|vh|vw|s|ms|deg)?"),
)

PY_RULES: tuple[TokenRule, ...] = (
    _rule("comment", r"#[^\n]*"),
    _rule(
        "string",
        r'"""[\s\S]*?"""|\'\'\'[\s\S]*?\'\'\''
        r'|"(?:\\.|[^"\\\n])*"|\'(?:\\.|[^\'\\\n])*\'',
    ),
    _keyword_rule(PY_KEYWORDS),
    _rule("number", _NUMBER),
    _rule("operator", r"[+\-*/%=<>&|!~^@:.,;{}\[\]()]"),
)

PLAINTEXT = LanguageSpec(
    id="plaintext",
    aliases=("text", "txt", "plain"),
    fold_mode="brace",
    comment=CommentStyle(line="//"),
    rules=(),
)

_LANGUAGES: tuple[LanguageSpec, ...] = (
    LanguageSpec(
        id="javascript",
        aliases=("js", "json", "jsx", "mjs"),
        fold_mode="brace",
        comment=CommentStyle(line="//"),
        rules=JS_RULES,
        completions=JS_KEYWORDS,
        scrape_identifiers=True,
    ),
    LanguageSpec(
        id="typescript",
        aliases=("ts", "tsx"),
        fold_mode="brace",
        comment=CommentStyle(line="//"),
        rules=TS_RULES,
        completions=TS_KEYWORDS,
        scrape_identifiers=True,
    ),
    LanguageSpec(
        id="python",
        aliases=("py",),
        fold_mode="brace",
        comment=CommentStyle(line="#"),
        rules=PY_RULES,
        completions=PY_KEYWORDS,
        scrape_identifiers=True,
        word_chars=r"\w",
    ),
    LanguageSpec(
        id="css",
        aliases=("scss",),
        fold_mode="brace",
        comment=CommentStyle(block=("/*", "*/")),
        rules=CSS_RULES,
        completions=CSS_PROPERTIES,
        word_chars=r"[\w-]",
    ),
    LanguageSpec(
        id="html",
        aliases=("htm", "xhtml"),
        fold_mode="tag",
        comment=CommentStyle(block=("<!--", "-->")),
        rules=(),
        completions=HTML_TAGS,
        word_chars=r"[\w-]",
    ),
    PLAINTEXT,
)


def _build_index(specs: tuple[LanguageSpec, ...]) -> Mapping[str, LanguageSpec]:
    index: dict[str, LanguageSpec] = {}
    for spec in specs:
        for name in (spec.id, *spec.aliases):
            index[name] = spec
    return MappingProxyType(index)


LANGUAGES: Mapping[str, LanguageSpec] = _build_index(_LANGUAGES)


def get_language(language: str | LanguageSpec | None) -> LanguageSpec:
    """Resolve an id or alias; unknown ids fall back to plain text."""

    if isinstance(language, LanguageSpec):
        return language
    if not language:
        return PLAINTEXT
    return LANGUAGES.get(language.strip().lower(), PLAINTEXT)


def require_language(language: str) -> LanguageSpec:
    spec = LANGUAGES.get(language.strip().lower())
    if spec is None:
        raise UnknownLanguageError(language)
    return spec


__all__ = [
    "CommentStyle",
    "FoldMode",
    "LanguageSpec",
    "LANGUAGES",
    "PLAINTEXT",
    "TokenRule",
    "VOID_ELEMENTS",
    "get_language",
    "require_language",
]
