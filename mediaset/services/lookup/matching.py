"""Fuzzy selection of the provider search result that best fits a title."""

from __future__ import annotations

import re
from operator import attrgetter
from typing import Callable, Optional, Sequence, TypeVar

T = TypeVar("T")

MATCH_THRESHOLD = 0.5
EXACT_MATCH_SCORE = 1.0
CONTAINS_MATCH_SCORE = 0.9

_WORD_SEPARATORS = re.compile(r"[ \-:.]")


def _words(value: str) -> list[str]:
    return [word for word in _WORD_SEPARATORS.split(value) if word]


def calculate_match_score(candidate_name: Optional[str], title: Optional[str]) -> float:
    """Score how well ``candidate_name`` matches the query ``title``.

    Returns 1.0 for a case-insensitive exact match, 0.9 when the candidate
    contains the whole title, and otherwise the share of title words that
    partially match some candidate word.
    """
    if not candidate_name or not candidate_name.strip() or not title or not title.strip():
        return 0.0

    name = candidate_name.lower()
    query = title.lower()
    if name == query:
        return EXACT_MATCH_SCORE
    if query in name:
        return CONTAINS_MATCH_SCORE

    query_words = _words(query)
    if not query_words:
        return 0.0
    name_words = _words(name)
    matched = sum(
        1
        for query_word in query_words
        if any(name_word in query_word or query_word in name_word for name_word in name_words)
    )
    return matched / len(query_words)


def find_best_match(
    candidates: Sequence[T],
    title: str,
    *,
    name_of: Callable[[T], str] = attrgetter("name"),
) -> Optional[T]:
    """Pick the candidate that best matches ``title``.

    A single candidate is returned without scoring. With several, the first
    highest-scoring candidate wins when it reaches ``MATCH_THRESHOLD``;
    otherwise the first candidate is returned. Only an empty sequence yields
    None.
    """
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    best = candidates[0]
    best_score = -1.0
    for candidate in candidates:
        score = calculate_match_score(name_of(candidate), title)
        if score > best_score:
            best, best_score = candidate, score

    if best_score >= MATCH_THRESHOLD:
        return best
    return candidates[0]


__all__ = ["MATCH_THRESHOLD", "calculate_match_score", "find_best_match"]
