"""
Trim raw catalog payloads down to PluginRecord.

The catalog returns far more than a card needs (sections, screenshots,
contributors...). Only REQUIRED_KEYS survive so cached entries stay small.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from pydantic import ValidationError

from src.catalog.errors import MalformedResponseError
from src.catalog.models import REQUIRED_KEYS, PluginRecord


def remove_unused_params(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: raw[key] for key in REQUIRED_KEYS if key in raw}


def normalize_plugin(raw: Any) -> PluginRecord:
    """Build a PluginRecord from one catalog entry (dict), keeping REQUIRED_KEYS only."""
    if not isinstance(raw, Mapping):
        raise MalformedResponseError(
            "Catalog entry is not an object.",
            detail=repr(raw)[:200],
        )

    data = remove_unused_params(raw)
    payload = {
        "slug": _coerce_text(data.get("slug")).strip(),
        "name": _coerce_text(data.get("name")),
        "version": _coerce_text(data.get("version")),
        "last_updated": _coerce_timestamp(data.get("last_updated")),
        "author": _coerce_text(data.get("author")),
        "short_description": _coerce_text(data.get("short_description")),
        "rating": _coerce_rating(data.get("rating")),
        "num_ratings": _coerce_count(data.get("num_ratings")),
        "active_installs": _coerce_count(data.get("active_installs")),
        "downloaded": _coerce_count(data.get("downloaded")),
        "download_link": _coerce_text(data.get("download_link")),
        "icons": _coerce_icons(data.get("icons")),
    }
    try:
        return PluginRecord(**payload)
    except ValidationError as exc:
        raise MalformedResponseError(f"Catalog entry validation failed: {exc}", payload=dict(data)) from exc


def normalize_plugin_list(entries: Any) -> List[PluginRecord]:
    """Normalize the `plugins` collection of a query_plugins answer."""
    if entries is None:
        return []
    if isinstance(entries, Mapping):
        # Older API versions key the list by slug.
        items: Iterable[Any] = entries.values()
    elif isinstance(entries, list):
        items = entries
    else:
        raise MalformedResponseError("Catalog plugin list is not an array.", detail=repr(entries)[:200])
    return [normalize_plugin(entry) for entry in items]


def _coerce_text(value: Any) -> str:
    if value is None or value is False:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _coerce_count(value: Any) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        count = int(float(value))
    except (TypeError, ValueError):
        return 0
    return max(count, 0)


def _coerce_rating(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    if isinstance(value, str):
        value = value.replace(",", ".").strip()
    try:
        rating = float(value)
    except (TypeError, ValueError):
        return 0.0
    return min(max(rating, 0.0), 100.0)


def _coerce_timestamp(value: Any):
    if value is None or value == "" or value is False:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return str(value)


def _coerce_icons(value: Any) -> Dict[str, str]:
    # The catalog sends [] instead of {} when a plugin has no icons.
    if not isinstance(value, Mapping):
        return {}
    return {str(size): str(url) for size, url in value.items() if isinstance(url, str) and url.strip()}
