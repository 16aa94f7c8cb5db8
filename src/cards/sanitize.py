"""
HTML sanitization for catalog text.

Catalog fields are third-party input: author bylines and versions may carry
a little markup and are filtered through an allow-list, everything else is
reduced to plain text.
"""

from __future__ import annotations

import re
from typing import Dict, FrozenSet, Mapping

from bs4 import BeautifulSoup

# tag -> attributes it may keep
PLUGIN_ALLOWED_TAGS: Dict[str, FrozenSet[str]] = {
    "a": frozenset({"href", "title", "target"}),
    "abbr": frozenset({"title"}),
    "acronym": frozenset({"title"}),
    "cite": frozenset(),
    "code": frozenset(),
    "pre": frozenset(),
    "em": frozenset(),
    "strong": frozenset(),
    "ul": frozenset({"type"}),
    "ol": frozenset(),
    "li": frozenset(),
    "p": frozenset(),
    "br": frozenset(),
}

ALLOWED_PROTOCOLS = frozenset({"http", "https", "ftp", "ftps", "mailto", "news", "irc", "gopher", "nntp", "feed", "telnet"})

# Elements dropped together with their contents.
_DROP_WITH_CONTENT = ("script", "style")

_SCHEME_RE = re.compile(r"^\s*([a-zA-Z][a-zA-Z0-9+.\-]*)\s*:")


def strip_tags(text: str) -> str:
    """Remove every tag (and script/style bodies), returning plain text."""
    if not text:
        return ""
    soup = BeautifulSoup(text, "html.parser")
    for element in soup.find_all(_DROP_WITH_CONTENT):
        element.decompose()
    return soup.get_text().strip()


def _safe_url(value: str) -> bool:
    # Control characters can hide a scheme ("java\tscript:").
    cleaned = re.sub(r"[\x00-\x20]", "", value)
    match = _SCHEME_RE.match(cleaned)
    if not match:
        return True
    return match.group(1).lower() in ALLOWED_PROTOCOLS


def kses(text: str, allowed: Mapping[str, FrozenSet[str]] = PLUGIN_ALLOWED_TAGS) -> str:
    """
    Keep only allow-listed tags and attributes.

    Disallowed tags are unwrapped (their text survives), disallowed
    attributes are removed and URLs with unknown protocols are dropped.
    """
    if not text:
        return ""
    soup = BeautifulSoup(text, "html.parser")
    for element in soup.find_all(_DROP_WITH_CONTENT):
        element.decompose()

    for tag in soup.find_all(True):
        if tag.name not in allowed:
            tag.unwrap()
            continue
        permitted = allowed[tag.name]
        for attr in list(tag.attrs):
            if attr not in permitted:
                del tag[attr]
            elif attr == "href" and not _safe_url(str(tag[attr])):
                del tag[attr]
    return str(soup).strip()


def sanitize_key(key: str) -> str:
    """Lowercase and keep only [a-z0-9_-], as used for data-slug attributes."""
    return re.sub(r"[^a-z0-9_\-]", "", (key or "").lower())
