"""Autocomplete trigger detection and candidate ranking."""

from .suggestions import (
    PartialWord,
    candidate_words,
    filter_candidates,
    partial_word,
    scrape_identifiers,
    suggest,
)

__all__ = [
    "PartialWord",
    "candidate_words",
    "filter_candidates",
    "partial_word",
    "scrape_identifiers",
    "suggest",
]
