"""Title cleanup and attribute extraction for barcode database titles.

Barcode databases describe retail products rather than works, so titles carry
platform names, media formats, conditions, SKUs and edition marketing. The
functions here reduce them to something a catalog search will match and pull
out the attributes worth keeping.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

# Games -----------------------------------------------------------------------

_EDITION_PATTERN = re.compile(
    r"\b(Deluxe|GOTY|Game of the Year|Definitive|Collector'?s Edition|Complete|Ultimate)\b",
    re.IGNORECASE,
)
_GAME_PLATFORM_PATTERN = re.compile(
    r"\b(?:PS[2-5]|PlayStation\s?[2-5]|PlayStation|Xbox Series X\|S|Xbox Series X|Xbox One"
    r"|Xbox 360|Xbox|(?:Nintendo\s+)?(?:Switch|Wii U|Wii|3DS|DS))\b",
    re.IGNORECASE,
)
_GAME_FORMAT_MARKERS = (
    re.compile(r"\s*\([^)]*\b(?:Disc|Cartridge|Digital)\b[^)]*\)", re.IGNORECASE),
    re.compile(r"\s*\[[^\]]*\b(?:Disc|Cartridge|Digital)\b[^\]]*\]", re.IGNORECASE),
    re.compile(r"\s*-\s*(?:Disc|Cartridge|Digital)\b.*$", re.IGNORECASE),
)
_GAME_CONDITION_SUFFIX = re.compile(
    r"\s*-\s*(?:Pre-Played|Pre-Owned|Used|Greatest Hits|Platinum Hits|Player'?s Choice"
    r"|Nintendo Selects|Essentials)\b.*$",
    re.IGNORECASE,
)
_GAME_SEGMENT_SPLIT = re.compile(r"\s+-(?=\s|$)")
_GAME_METADATA_SEGMENT = re.compile(
    r"(?:DVD|Blu-?ray|Disc|Cartridge|Digital|UMD|NTSC(?:[- ]?(?:U/C|U|J))?|PAL|Region Free|Import"
    r"|English|French|Spanish|German|Italian|Japanese|Multi-?Language)",
    re.IGNORECASE,
)
_DANGLING_DASH = re.compile(r"\s*-\s*$")
_SKU_PATTERN = re.compile(r"\b[A-Z0-9]{3,}-[A-Z0-9]{2,}\b")
_PAREN_GROUP = re.compile(r"\s*\([^)]*\)")
_BRACKET_GROUP = re.compile(r"\s*\[[^\]]*\]")
_WHITESPACE = re.compile(r"\s+")

_PLATFORM_HINTS: Tuple[Tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bPS5\b|PlayStation\s?5", re.IGNORECASE), "PlayStation 5"),
    (re.compile(r"\bPS4\b|PlayStation\s?4", re.IGNORECASE), "PlayStation 4"),
    (re.compile(r"\bPS3\b|PlayStation\s?3", re.IGNORECASE), "PlayStation 3"),
    (re.compile(r"Xbox Series X\|S|Series X", re.IGNORECASE), "Xbox Series X|S"),
    (re.compile(r"Xbox One", re.IGNORECASE), "Xbox One"),
    (re.compile(r"Xbox 360", re.IGNORECASE), "Xbox 360"),
    (re.compile(r"Nintendo Switch|\bSwitch\b", re.IGNORECASE), "Nintendo Switch"),
    (re.compile(r"\bWii U\b", re.IGNORECASE), "Wii U"),
    (re.compile(r"\bWii\b", re.IGNORECASE), "Wii"),
    (re.compile(r"\b3DS\b", re.IGNORECASE), "Nintendo 3DS"),
    (re.compile(r"\bDS\b", re.IGNORECASE), "Nintendo DS"),
)


def _collapse_whitespace(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def _drop_metadata_segments(title: str) -> str:
    segments = [segment.strip() for segment in _GAME_SEGMENT_SPLIT.split(title)]
    kept = [segments[0]]
    for segment in segments[1:]:
        if not segment or _GAME_METADATA_SEGMENT.fullmatch(segment):
            continue
        kept.append(segment)
    return " - ".join(kept)


def clean_game_title_and_extract_edition(raw_title: Optional[str]) -> Tuple[str, str]:
    """Return ``(search_title, edition)`` for a retail game title.

    >>> clean_game_title_and_extract_edition("Cyberpunk 2077 Deluxe Edition")
    ('Cyberpunk 2077', 'Deluxe')
    """
    if not raw_title or not raw_title.strip():
        return "", ""

    title = raw_title.strip()

    edition_match = _EDITION_PATTERN.search(title)
    edition = edition_match.group(1) if edition_match else ""

    title = _GAME_PLATFORM_PATTERN.sub("", title)
    for pattern in _GAME_FORMAT_MARKERS:
        title = pattern.sub("", title)
    title = _GAME_CONDITION_SUFFIX.sub("", title)
    title = _drop_metadata_segments(title)
    title = _DANGLING_DASH.sub("", title)
    title = _SKU_PATTERN.sub("", title)

    if edition:
        escaped = re.escape(edition)
        title = re.sub(escaped + r"\s*Edition", "", title, flags=re.IGNORECASE)
        title = re.sub(escaped, "", title, flags=re.IGNORECASE)

    title = _PAREN_GROUP.sub("", title)
    title = _BRACKET_GROUP.sub("", title)
    title = _collapse_whitespace(title)
    title = _DANGLING_DASH.sub("", title).strip()
    return title, edition


def extract_game_format(raw_title: Optional[str]) -> str:
    """Media format named in a game title: Cartridge, Disc, Digital or ``""``."""
    if not raw_title:
        return ""
    if re.search(r"Cartridge", raw_title, re.IGNORECASE):
        return "Cartridge"
    if re.search(r"Disc|Blu-?ray|DVD", raw_title, re.IGNORECASE):
        return "Disc"
    if re.search(r"Digital", raw_title, re.IGNORECASE):
        return "Digital"
    return ""


def extract_platform_from_barcode(
    title: Optional[str],
    category: Optional[str] = None,
    brand: Optional[str] = None,
    model: Optional[str] = None,
) -> str:
    """Guess the console from a barcode record, trusting the title first."""
    title_text = title or ""
    for pattern, platform in _PLATFORM_HINTS:
        if pattern.search(title_text):
            return platform

    combined = " ".join(part for part in (category, brand, model) if part)
    for pattern, platform in _PLATFORM_HINTS:
        if pattern.search(combined):
            return platform
    return ""


# Movies ----------------------------------------------------------------------

_MOVIE_FORMAT = (
    r"(?:4K\s+Ultra\s+HD|4K\s+UHD|Ultra\s+HD|4K|UHD|Blu-?ray(?:\s+3D)?|BD|DVD"
    r"|Digital(?:\s+(?:HD|Copy|Code))?|HD)"
)
_MOVIE_FORMAT_TOKEN = re.compile(rf"\b{_MOVIE_FORMAT}\b", re.IGNORECASE)
_MOVIE_FORMAT_COMBO = re.compile(
    rf"\b{_MOVIE_FORMAT}(?:\s*\+\s*{_MOVIE_FORMAT})+\b", re.IGNORECASE
)
_DISC_COUNT = r"(?:\d+|one|two|three|four|five|six|seven|eight|nine|ten)"

_MOVIE_CONDITION_WORDS = re.compile(
    r"\s+(?:LIKE NEW|NEW|USED|SEALED|MINT|OPENED|UNOPENED)\s*$", re.IGNORECASE
)
_LEADING_FORMAT_GROUP = re.compile(
    rf"^\s*[\(\[][^\)\]]*\b{_MOVIE_FORMAT}\b[^\)\]]*[\)\]]\s*", re.IGNORECASE
)
_COMMA_DISC_COUNT = re.compile(rf",\s*{_DISC_COUNT}[-\s]*Discs?\b.*$", re.IGNORECASE)
_FORMAT_COMBO_SUFFIX = re.compile(
    rf"\s*[-:]?\s*\b{_MOVIE_FORMAT}(?:\s*\+\s*{_MOVIE_FORMAT})+.*$", re.IGNORECASE
)
_DASH_FORMAT_SUFFIX = re.compile(rf"\s*-\s*\b{_MOVIE_FORMAT}\b.*$", re.IGNORECASE)
_BARE_FORMAT_SUFFIX = re.compile(rf"\s+{_MOVIE_FORMAT}\s*$", re.IGNORECASE)
_DISC_COUNT_EDITION = re.compile(
    rf"\s*[-:,]?\s*\b{_DISC_COUNT}[-\s]?Discs?\b.*$", re.IGNORECASE
)
_COMPLETE_COLLECTION = re.compile(
    r"\s*[-:,]?\s*(?:The\s+)?Complete\s+Collection\s*$", re.IGNORECASE
)
_TRAILING_PUNCTUATION = re.compile(r"[\s\-:,]+$")
_TRAILING_ARTICLE = re.compile(r"^(.+?),?\s+(A|The)$", re.IGNORECASE)


def _truncate_at_group(title: str) -> str:
    match = re.search(r"[\(\[]", title[1:])
    if match is None:
        return title
    return title[: match.start() + 1]


def _strip_brand(title: str, brand: str) -> str:
    escaped = re.escape(brand)
    stripped = re.sub(rf"^{escaped}\s*[-:]\s*", "", title, flags=re.IGNORECASE)
    trailing = re.sub(rf"\s*[-:]?\s*{escaped}\s*$", "", stripped, flags=re.IGNORECASE)
    return trailing if trailing.strip() else stripped


def _clean_movie_pass(title: str, brand: str) -> str:
    if brand:
        title = _strip_brand(title, brand)
    title = _MOVIE_CONDITION_WORDS.sub("", title)
    title = _LEADING_FORMAT_GROUP.sub("", title)
    title = _truncate_at_group(title)
    title = _COMMA_DISC_COUNT.sub("", title)
    title = _FORMAT_COMBO_SUFFIX.sub("", title)
    title = _DASH_FORMAT_SUFFIX.sub("", title)
    title = _BARE_FORMAT_SUFFIX.sub("", title)
    title = _DISC_COUNT_EDITION.sub("", title)
    title = _COMPLETE_COLLECTION.sub("", title)
    title = _TRAILING_PUNCTUATION.sub("", title)
    return _collapse_whitespace(title)


def clean_movie_title(raw_title: Optional[str], brand: Optional[str] = None) -> str:
    """Reduce a retail movie title to the film's name.

    Passes repeat until the title stops changing, then a trailing article is
    moved to the front ("Scanner Darkly A" becomes "A Scanner Darkly").
    """
    if not raw_title or not raw_title.strip():
        return ""

    brand_text = (brand or "").strip()
    title = _collapse_whitespace(raw_title)
    previous = None
    while title and title != previous:
        previous = title
        title = _clean_movie_pass(title, brand_text)

    article_match = _TRAILING_ARTICLE.match(title)
    if article_match:
        title = f"{article_match.group(2)} {article_match.group(1).strip()}"
    return title


def _normalize_movie_format(token: str) -> str:
    collapsed = _collapse_whitespace(token).lower()
    if "ultra" in collapsed or "uhd" in collapsed:
        return "4K UHD"
    if collapsed == "4k":
        return "4K"
    if collapsed.startswith("blu"):
        return "Blu-ray 3D" if collapsed.endswith("3d") else "Blu-ray"
    if collapsed == "bd":
        return "Blu-ray"
    if collapsed == "dvd":
        return "DVD"
    if collapsed.startswith("digital"):
        return "Digital"
    return "HD"


def _format_in(text: str) -> str:
    combo = _MOVIE_FORMAT_COMBO.search(text)
    if combo:
        tokens: List[str] = []
        for token in _MOVIE_FORMAT_TOKEN.findall(combo.group(0)):
            normalized = _normalize_movie_format(token)
            if normalized not in tokens:
                tokens.append(normalized)
        return " + ".join(tokens)
    token = _MOVIE_FORMAT_TOKEN.search(text)
    return _normalize_movie_format(token.group(0)) if token else ""


def extract_movie_format(raw_title: Optional[str]) -> str:
    """Media format named in a movie title, e.g. ``"Blu-ray"`` or ``"4K UHD"``.

    Parenthesised and bracketed groups are checked first, then a dash suffix,
    then a bare trailing format word.
    """
    if not raw_title or not raw_title.strip():
        return ""

    for group in re.findall(r"\(([^)]*)\)", raw_title) + re.findall(r"\[([^\]]*)\]", raw_title):
        media_format = _format_in(group)
        if media_format:
            return media_format

    outside = _collapse_whitespace(_BRACKET_GROUP.sub(" ", _PAREN_GROUP.sub(" ", raw_title)))
    outside = _MOVIE_CONDITION_WORDS.sub("", outside)

    dash_match = re.search(rf"\s-\s*(\b{_MOVIE_FORMAT}\b.*)$", outside, re.IGNORECASE)
    if dash_match:
        return _format_in(dash_match.group(1))

    tail_match = re.search(
        rf"\s((?:{_MOVIE_FORMAT}\s*\+\s*)*{_MOVIE_FORMAT})\s*$", outside, re.IGNORECASE
    )
    if tail_match:
        return _format_in(tail_match.group(1))
    return ""


__all__ = [
    "clean_game_title_and_extract_edition",
    "clean_movie_title",
    "extract_game_format",
    "extract_movie_format",
    "extract_platform_from_barcode",
]
