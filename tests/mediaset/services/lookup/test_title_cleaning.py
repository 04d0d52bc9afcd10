from __future__ import annotations

import pytest

from mediaset.services.lookup.title_cleaning import (
    clean_game_title_and_extract_edition,
    clean_movie_title,
    extract_game_format,
    extract_movie_format,
    extract_platform_from_barcode,
)

pytestmark = pytest.mark.lookup


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Black - Pre-Played", ("Black", "")),
        ("Cyberpunk 2077 Deluxe Edition", ("Cyberpunk 2077", "Deluxe")),
        ("Red Dead Redemption 2 - PlayStation 4 - Pre-Played", ("Red Dead Redemption 2", "")),
        ("Fallout 4 Game of the Year Edition", ("Fallout 4", "Game of the Year")),
        ("Super Mario Odyssey (Nintendo Switch)", ("Super Mario Odyssey", "")),
        ("Halo 3 - Xbox 360 - Greatest Hits", ("Halo 3", "")),
        ("Zelda Breath of the Wild [Cartridge]", ("Zelda Breath of the Wild", "")),
        ("Alan Wake - Xbox 360 - DVD - English", ("Alan Wake", "")),
        ("", ("", "")),
        ("   ", ("", "")),
    ],
)
def test_clean_game_title_and_extract_edition(raw: str, expected: tuple) -> None:
    assert clean_game_title_and_extract_edition(raw) == expected


def test_edition_keeps_matched_case() -> None:
    _, edition = clean_game_title_and_extract_edition("Skyrim ULTIMATE edition")
    assert edition == "ULTIMATE"


@pytest.mark.parametrize(
    "raw",
    [
        "Red Dead Redemption 2 - PlayStation 4 - Pre-Played",
        "Cyberpunk 2077 Deluxe Edition",
        "Dark Souls III (Disc) PS4",
    ],
)
def test_game_title_cleaning_is_idempotent(raw: str) -> None:
    cleaned, _ = clean_game_title_and_extract_edition(raw)
    assert clean_game_title_and_extract_edition(cleaned)[0] == cleaned


def test_word_boundaries_protect_title_words() -> None:
    cleaned, edition = clean_game_title_and_extract_edition("Completely Dishonored")
    assert edition == ""
    assert cleaned == "Completely Dishonored"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Mario Kart 8 (Cartridge)", "Cartridge"),
        ("Gran Turismo 7 - Disc", "Disc"),
        ("Forza Horizon 5 Blu-ray", "Disc"),
        ("Minecraft Digital Code", "Digital"),
        ("Tetris", ""),
        (None, ""),
    ],
)
def test_extract_game_format(raw, expected: str) -> None:
    assert extract_game_format(raw) == expected


def test_platform_hint_prefers_title() -> None:
    assert (
        extract_platform_from_barcode("God of War PS4", category="Xbox One Games")
        == "PlayStation 4"
    )


def test_platform_hint_falls_back_to_item_details() -> None:
    assert (
        extract_platform_from_barcode("Halo Infinite", category="Video Games", brand="Xbox One")
        == "Xbox One"
    )
    assert extract_platform_from_barcode("Tetris", category="Puzzles") == ""


def test_platform_hint_does_not_match_inside_words() -> None:
    assert extract_platform_from_barcode("Dsomething Adventures") == ""


@pytest.mark.parametrize(
    ("raw", "brand", "expected"),
    [
        ("1408 (Two-Disc Collector's Edition)", None, "1408"),
        ("The Matrix (Blu-ray + DVD)", None, "The Matrix"),
        ("Warner Bros - Inception - Blu-ray", "Warner Bros", "Inception"),
        ("Inception 4K Ultra HD", None, "Inception"),
        ("Scanner Darkly A", None, "A Scanner Darkly"),
        ("Jaws DVD NEW", None, "Jaws"),
        ("Friends, Ten-Disc Set", None, "Friends"),
        ("Back to the Future: The Complete Collection", None, "Back to the Future"),
        ("[Blu-ray] Dune", None, "Dune"),
        ("", None, ""),
    ],
)
def test_clean_movie_title(raw: str, brand, expected: str) -> None:
    assert clean_movie_title(raw, brand) == expected


@pytest.mark.parametrize(
    "raw",
    ["The Matrix (Blu-ray + DVD)", "Warner Bros - Inception - Blu-ray", "Jaws DVD NEW"],
)
def test_movie_title_cleaning_is_idempotent(raw: str) -> None:
    cleaned = clean_movie_title(raw)
    assert clean_movie_title(cleaned) == cleaned


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("The Matrix (Blu-ray + DVD)", "Blu-ray + DVD"),
        ("Inception - Blu-ray", "Blu-ray"),
        ("Inception 4K Ultra HD", "4K UHD"),
        ("Dune [4K UHD + Blu-ray + Digital]", "4K UHD + Blu-ray + Digital"),
        ("Avatar (BD)", "Blu-ray"),
        ("Jaws DVD", "DVD"),
        ("1408 (Two-Disc Collector's Edition)", ""),
        ("", ""),
    ],
)
def test_extract_movie_format(raw: str, expected: str) -> None:
    assert extract_movie_format(raw) == expected
