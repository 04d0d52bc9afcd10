from __future__ import annotations

from dataclasses import dataclass

import pytest

from mediaset.services.lookup.matching import calculate_match_score, find_best_match

pytestmark = pytest.mark.lookup


@dataclass(frozen=True)
class _Game:
    id: int
    name: str


def test_single_candidate_is_returned_without_scoring() -> None:
    only = _Game(1, "Halo Infinite")
    assert find_best_match([only], "Halo Infinite") is only
    assert find_best_match([only], "Something else entirely") is only


def test_empty_candidates_returns_none() -> None:
    assert find_best_match([], "Anything") is None


def test_best_scoring_candidate_wins() -> None:
    candidates = [
        _Game(999, "Super Mario Bros."),
        _Game(12345, "Super Mario Odyssey"),
        _Game(888, "Super Mario 64"),
    ]
    assert find_best_match(candidates, "Super Mario Odyssey").id == 12345


def test_low_scores_fall_back_to_first_candidate() -> None:
    candidates = [_Game(1, "Totally Different Game"), _Game(2, "Another Different Game")]
    assert find_best_match(candidates, "Expected Game Title").id == 1


def test_ties_keep_original_order() -> None:
    candidates = [_Game(1, "Zelda Collection"), _Game(2, "Zelda Anthology")]
    assert find_best_match(candidates, "Zelda").id == 1


def test_custom_name_accessor() -> None:
    candidates = [{"title": "Portal"}, {"title": "Portal 2"}]
    best = find_best_match(candidates, "portal 2", name_of=lambda item: item["title"])
    assert best == {"title": "Portal 2"}


@pytest.mark.parametrize(
    ("name", "title", "expected"),
    [
        ("Halo Infinite", "halo infinite", 1.0),
        ("Halo: The Master Chief Collection", "Master Chief", 0.9),
        ("The Witcher 3: Wild Hunt", "Witcher Hunt Blood", pytest.approx(2 / 3)),
        ("", "Anything", 0.0),
        ("Anything", "   ", 0.0),
    ],
)
def test_calculate_match_score(name: str, title: str, expected: float) -> None:
    assert calculate_match_score(name, title) == expected
