"""Canonicalisation helpers shared by the lookup clients and strategies."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable, List, Optional, Sequence, Tuple

from .provider_models import GamePlatform, ReleaseTag
from .types import Subject

_WORD_PATTERN = re.compile(r"[^\W_][\w']*")
_SPACE_BEFORE_SEMICOLON = re.compile(r"\s+;")
_SPACE_AFTER_SEMICOLON = re.compile(r";\s*")
_MULTI_SPACE = re.compile(r"\s{2,}")

MAX_TAG_GENRES = 5


def title_case(text: str) -> str:
    """Capitalize each word, leaving all-uppercase words untouched."""

    def _capitalize(match: re.Match[str]) -> str:
        word = match.group(0)
        if len(word) > 1 and word.isupper():
            return word
        return word[0].upper() + word[1:].lower()

    return _WORD_PATTERN.sub(_capitalize, text)


def normalize_subject_key(subject: Subject) -> str:
    """Return the case, diacritic and punctuation insensitive grouping key."""
    source = subject.name if subject.name and subject.name.strip() else (subject.url or "")
    if not source:
        return ""
    decomposed = unicodedata.normalize("NFD", source).lower()
    kept = [
        char
        for char in decomposed
        if unicodedata.category(char) != "Mn" and char.isalnum()
    ]
    return unicodedata.normalize("NFC", "".join(kept))


def normalize_display_subject(name: Optional[str]) -> str:
    """Title-case a subject and render comma lists as ``"a; b"``."""
    text = (name or "").strip()
    if not text:
        return ""
    text = title_case(text.lower())
    text = text.replace(",", ";")
    text = _SPACE_BEFORE_SEMICOLON.sub(";", text)
    text = _SPACE_AFTER_SEMICOLON.sub("; ", text)
    text = _MULTI_SPACE.sub(" ", text)
    return text.strip()


def deduplicate_subjects(subjects: Iterable[Subject]) -> List[Subject]:
    """Collapse near-identical subjects, keeping the first of each group.

    The surviving entry's name is converted to its display form; its URL is
    kept as provided.
    """
    seen: set[str] = set()
    result: List[Subject] = []
    for subject in subjects:
        key = normalize_subject_key(subject)
        if key in seen:
            continue
        seen.add(key)
        result.append(Subject(name=normalize_display_subject(subject.name), url=subject.url))
    return result


def capitalize_genre(genre: Optional[str]) -> str:
    """``"hip-hop"`` -> ``"Hip Hop"``."""
    if not genre or not genre.strip():
        return ""
    words = [word for word in re.split(r"[ \-]", genre) if word]
    return " ".join(word[0].upper() + word[1:].lower() for word in words)


def genres_from_tags(tags: Sequence[ReleaseTag], limit: int = MAX_TAG_GENRES) -> List[str]:
    """Top ``limit`` tags by vote count, capitalized for display."""
    ranked = sorted(tags, key=lambda tag: tag.count, reverse=True)
    genres: List[str] = []
    for tag in ranked[:limit]:
        genre = capitalize_genre(tag.name)
        if genre:
            genres.append(genre)
    return genres


# Rating board categories and their rating codes.
ESRB_CATEGORY = 1
PEGI_CATEGORY = 2

_ESRB_RATINGS = {6: "RP", 7: "EC", 8: "E", 9: "E10+", 10: "T", 11: "M", 12: "AO"}
_PEGI_RATINGS = {1: "3", 2: "7", 3: "12", 4: "16", 5: "18"}


def decode_age_rating(ratings: Optional[Iterable[Tuple[int, int]]]) -> str:
    """Render ``(category, rating)`` pairs as ``"ESRB: T"`` or ``"PEGI: 18"``.

    An ESRB rating wins over PEGI wherever it appears in the list. Unknown
    boards and codes are ignored.
    """
    if not ratings:
        return ""
    pegi: Optional[str] = None
    for category, code in ratings:
        if category == ESRB_CATEGORY and code in _ESRB_RATINGS:
            return f"ESRB: {_ESRB_RATINGS[code]}"
        if category == PEGI_CATEGORY and code in _PEGI_RATINGS and pegi is None:
            pegi = f"PEGI: {_PEGI_RATINGS[code]}"
    return pegi or ""


DEFAULT_PLATFORM_FORMAT = "DVD"

# Checked in order; Dreamcast precedes the generic CD-ROM rows.
_PLATFORM_FORMATS: Tuple[Tuple[str, re.Pattern[str]], ...] = (
    ("GD-ROM", re.compile(r"dreamcast")),
    (
        "Cartridge",
        re.compile(
            r"switch|\b3ds\b|\bds\b|game\s?boy|\bn64\b|nintendo 64|\bs?nes\b"
            r"|super nintendo|nintendo entertainment system|genesis|mega drive|game gear"
        ),
    ),
    (
        "Blu-ray Disc",
        re.compile(r"playstation 5|\bps5\b|playstation 4|\bps4\b|xbox series|xbox one"),
    ),
    ("DVD", re.compile(r"playstation 3|\bps3\b|playstation 2|\bps2\b|xbox 360|\bxbox\b|\bwii\b")),
    ("CD-ROM", re.compile(r"\bplaystation\b(?!\s*[2-5])|\bps1\b|saturn|sega cd")),
    ("Nintendo eShop", re.compile(r"eshop|digital|download")),
    ("CD-ROM", re.compile(r"\bpc\b|windows|\bmac\b|macintosh|linux")),
)


def _select_platform(platforms: Sequence[GamePlatform], detected: str) -> GamePlatform:
    hint = detected.strip().lower()
    if hint:
        for platform in platforms:
            name = platform.name.lower()
            if name and (hint in name or name in hint):
                return platform
    return platforms[0]


def derive_format_from_platforms(
    platforms: Optional[Sequence[GamePlatform]], detected_platform: Optional[str] = ""
) -> str:
    """Infer a physical media format from a catalog's platform list.

    The platform matching ``detected_platform`` is preferred, otherwise the
    first one is used. Platforms outside the table fall back to
    ``DEFAULT_PLATFORM_FORMAT``, which is an approximation rather than a fact
    about the release.
    """
    if not platforms:
        return ""
    platform = _select_platform(platforms, detected_platform or "")
    name = platform.name.lower()
    for media_format, pattern in _PLATFORM_FORMATS:
        if pattern.search(name):
            return media_format
    return DEFAULT_PLATFORM_FORMAT


__all__ = [
    "DEFAULT_PLATFORM_FORMAT",
    "ESRB_CATEGORY",
    "MAX_TAG_GENRES",
    "PEGI_CATEGORY",
    "capitalize_genre",
    "decode_age_rating",
    "deduplicate_subjects",
    "derive_format_from_platforms",
    "genres_from_tags",
    "normalize_display_subject",
    "normalize_subject_key",
    "title_case",
]
