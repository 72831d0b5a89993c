"""Regex tokenizer turning display text into a styled, non-overlapping stream.

Code languages collect candidate matches from every rule, sort them by start
offset then rule order, and accept them greedily. HTML is tokenized in two
passes: tag runs are split from text runs first, then each tag run is broken
into tag/attribute/string/punctuation pieces.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .languages import LanguageSpec, TokenRule, get_language

TEXT = "text"

_HTML_RUN = re.compile(
    r"<!--[\s\S]*?-->"
    r"|</?[\w-]+(?:\s+[\w-]+(?:=(?:\"[^\"]*\"|'[^']*'|[^>\s]*))?)*\s*/?>"
)
_HTML_TAG_PARTS = re.compile(
    r"(?P<tag></?[\w-]+)"
    r"|(?P<string>\"[^\"]*\"|'[^']*')"
    r"|(?P<attribute>[\w-]+)"
    r"|(?P<tag_end>/?>)"
    r"|(?P<space>\s+)"
    r"|(?P<punctuation>=)"
)
_TAG_PART_KINDS = {
    "tag": "tag",
    "string": "string",
    "attribute": "attribute",
    "tag_end": "tag",
    "space": TEXT,
    "punctuation": "punctuation",
}

_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}
_ESCAPE_PATTERN = re.compile(r"[&<>\"']")


@dataclass(frozen=True, slots=True)
class Token:
    start: int
    end: int
    kind: str
    text: str


def escape(text: str) -> str:
    return _ESCAPE_PATTERN.sub(lambda match: _ESCAPES[match.group(0)], text)


def tokenize(text: str, language: str | LanguageSpec | None) -> List[Token]:
    """Return tokens covering ``text`` exactly, gaps included as ``"text"``."""

    if not text:
        return []
    spec = get_language(language)
    if spec.is_markup:
        return _tokenize_markup(text)
    if not spec.rules:
        return [Token(0, len(text), TEXT, text)]
    return _fill_gaps(text, _select_rule_matches(text, spec.rules))


def highlight(text: str, language: str | LanguageSpec | None) -> str:
    """Escaped markup for an overlay, one ``span`` per styled token."""

    return render(tokenize(text, language))


def render(tokens: Iterable[Token]) -> str:
    parts: list[str] = []
    for token in tokens:
        if token.kind == TEXT:
            parts.append(escape(token.text))
        else:
            parts.append(f'<span class="tok-{token.kind}">{escape(token.text)}</span>')
    return "".join(parts)


def _select_rule_matches(
    text: str, rules: Sequence[TokenRule]
) -> List[tuple[int, int, str]]:
    candidates: list[tuple[int, int, int, str]] = []
    for priority, rule in enumerate(rules):
        for match in rule.pattern.finditer(text):
            if match.end() > match.start():
                candidates.append((match.start(), priority, match.end(), rule.kind))
    candidates.sort(key=lambda item: (item[0], item[1]))

    accepted: list[tuple[int, int, str]] = []
    last_end = 0
    for start, _priority, end, kind in candidates:
        if start >= last_end:
            accepted.append((start, end, kind))
            last_end = end
    return accepted


def _fill_gaps(text: str, spans: Iterable[tuple[int, int, str]]) -> List[Token]:
    tokens: list[Token] = []
    cursor = 0
    for start, end, kind in spans:
        if start > cursor:
            tokens.append(Token(cursor, start, TEXT, text[cursor:start]))
        tokens.append(Token(start, end, kind, text[start:end]))
        cursor = end
    if cursor < len(text):
        tokens.append(Token(cursor, len(text), TEXT, text[cursor:]))
    return tokens


def _tokenize_markup(text: str) -> List[Token]:
    spans: list[tuple[int, int, str]] = []
    for run in _HTML_RUN.finditer(text):
        if run.group(0).startswith("<!--"):
            spans.append((run.start(), run.end(), "comment"))
        else:
            spans.extend(_tag_parts(run.group(0), run.start()))
    return _fill_gaps(text, spans)


def _tag_parts(tag: str, offset: int) -> Iterable[tuple[int, int, str]]:
    for part in _HTML_TAG_PARTS.finditer(tag):
        kind = _TAG_PART_KINDS[part.lastgroup or "space"]
        if kind == TEXT:
            continue
        yield offset + part.start(), offset + part.end(), kind


__all__ = ["Token", "TEXT", "escape", "highlight", "render", "tokenize"]
