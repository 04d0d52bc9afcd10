"""Defensive field extraction from loosely-typed provider JSON."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from .types import Author, Publisher, Subject


def get_mapping(data: Any, key: str) -> Dict[str, Any]:
    """Return ``data[key]`` when it is an object, otherwise an empty dict."""
    if not isinstance(data, Mapping):
        return {}
    value = data.get(key)
    return dict(value) if isinstance(value, Mapping) else {}


def get_list(data: Any, key: str) -> List[Any]:
    """Return ``data[key]`` when it is an array, otherwise an empty list."""
    if not isinstance(data, Mapping):
        return []
    value = data.get(key)
    return list(value) if isinstance(value, list) else []


def get_str(data: Any, key: str, default: str = "") -> str:
    """Return ``data[key]`` rendered as text.

    Strings are returned as-is; other JSON scalars and structures are rendered
    as their JSON text so a shape change upstream never raises.
    """
    if not isinstance(data, Mapping) or key not in data:
        return default
    value = data[key]
    if value is None:
        return default
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def get_optional_str(data: Any, key: str) -> Optional[str]:
    """Return a stripped non-empty string, or None."""
    if not isinstance(data, Mapping):
        return None
    value = data.get(key)
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


def coerce_int(value: Any) -> Optional[int]:
    """Interpret JSON numbers and numeric strings as integers."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def get_int(data: Any, key: str, default: Optional[int] = 0) -> Optional[int]:
    if not isinstance(data, Mapping):
        return default
    parsed = coerce_int(data.get(key))
    return default if parsed is None else parsed


def get_float(data: Any, key: str, default: float = 0.0) -> float:
    if not isinstance(data, Mapping):
        return default
    value = data.get(key)
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return default
    return default


def get_names(data: Any, key: str, field: str = "name") -> List[str]:
    """Collect non-empty ``field`` values from an array of objects."""
    names: List[str] = []
    for entry in get_list(data, key):
        name = get_optional_str(entry, field)
        if name:
            names.append(name)
    return names


def extract_authors(data: Mapping[str, Any]) -> List[Author]:
    authors: List[Author] = []
    for entry in get_list(data, "authors"):
        if not isinstance(entry, Mapping):
            continue
        name = entry.get("name")
        if isinstance(name, str) and name:
            url = entry.get("url")
            authors.append(Author(name=name, url=url if isinstance(url, str) else ""))
    return authors


def extract_publishers(data: Mapping[str, Any]) -> List[Publisher]:
    publishers: List[Publisher] = []
    for entry in get_list(data, "publishers"):
        if isinstance(entry, str):
            name: Any = entry
        elif isinstance(entry, Mapping):
            name = entry.get("name")
        else:
            continue
        if isinstance(name, str) and name:
            publishers.append(Publisher(name=name))
    return publishers


def extract_subjects(data: Mapping[str, Any]) -> List[Subject]:
    """Return raw subjects; deduplication happens in :mod:`normalization`."""
    subjects: List[Subject] = []
    for entry in get_list(data, "subjects"):
        if isinstance(entry, str):
            if entry:
                subjects.append(Subject(name=entry))
            continue
        if not isinstance(entry, Mapping):
            continue
        name = entry.get("name")
        if isinstance(name, str) and name:
            url = entry.get("url")
            subjects.append(Subject(name=name, url=url if isinstance(url, str) else ""))
    return subjects


def extract_number_of_pages(data: Mapping[str, Any]) -> int:
    """Page count, preferring ``number_of_pages`` over ``pagination``."""
    for key in ("number_of_pages", "pagination"):
        if key in data:
            parsed = coerce_int(data[key])
            return parsed if parsed is not None else 0
    return 0


__all__ = [
    "coerce_int",
    "extract_authors",
    "extract_number_of_pages",
    "extract_publishers",
    "extract_subjects",
    "get_float",
    "get_int",
    "get_list",
    "get_mapping",
    "get_names",
    "get_optional_str",
    "get_str",
]
