"""Completion candidates: a fixed word list per language plus buffer identifiers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Pattern

from fold_engine.syntax.languages import LanguageSpec, get_language

MIN_IDENTIFIER_LENGTH = 2


@dataclass(frozen=True, slots=True)
class PartialWord:
    text: str
    start: int
    end: int


@lru_cache(maxsize=None)
def _word_pattern(word_chars: str) -> Pattern[str]:
    return re.compile(f"{word_chars}+")


@lru_cache(maxsize=None)
def _trailing_word(word_chars: str) -> Pattern[str]:
    return re.compile(f"{word_chars}*$")


def partial_word(text: str, caret: int, language: str | LanguageSpec | None) -> PartialWord:
    """The run of word characters ending at ``caret``."""

    spec = get_language(language)
    caret = max(0, min(caret, len(text)))
    line_start = text.rfind("\n", 0, caret) + 1
    match = _trailing_word(spec.word_chars).search(text, line_start, caret)
    start = match.start() if match else caret
    return PartialWord(text=text[start:caret], start=start, end=caret)


def scrape_identifiers(text: str, language: str | LanguageSpec | None) -> List[str]:
    spec = get_language(language)
    found = {
        word
        for word in _word_pattern(spec.word_chars).findall(text)
        if len(word) >= MIN_IDENTIFIER_LENGTH and not word[0].isdigit()
    }
    return sorted(found)


def candidate_words(text: str, language: str | LanguageSpec | None) -> List[str]:
    """Fixed words in language order, then scraped identifiers alphabetically."""

    spec = get_language(language)
    words = list(dict.fromkeys(spec.completions))
    if spec.scrape_identifiers:
        seen = set(words)
        words.extend(word for word in scrape_identifiers(text, spec) if word not in seen)
    return words


def filter_candidates(words: List[str], prefix: str, *, limit: int | None = None) -> List[str]:
    matches = [word for word in words if word.startswith(prefix) and word != prefix]
    if limit is not None:
        return matches[:limit]
    return matches


def suggest(
    text: str,
    caret: int,
    language: str | LanguageSpec | None,
    *,
    corpus: str | None = None,
    limit: int | None = None,
    explicit: bool = False,
) -> tuple[PartialWord, List[str]]:
    """Candidates for the word ending at ``caret`` in ``text``.

    Identifiers are scraped from ``corpus`` (defaults to ``text``), so a
    caller can complete against display text while still offering names that
    only appear inside folded blocks. An empty partial word yields nothing
    unless the request is ``explicit``, in which case every candidate is
    offered.
    """

    word = partial_word(text, caret, language)
    if not word.text and not explicit:
        return word, []
    words = candidate_words(text if corpus is None else corpus, language)
    return word, filter_candidates(words, word.text, limit=limit)


__all__ = [
    "PartialWord",
    "candidate_words",
    "filter_candidates",
    "partial_word",
    "scrape_identifiers",
    "suggest",
]
