from __future__ import annotations

from typing import Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

# Keys kept from a raw catalog payload; everything else is dropped before caching.
REQUIRED_KEYS: Tuple[str, ...] = (
    "slug",
    "name",
    "version",
    "last_updated",
    "author",
    "short_description",
    "rating",
    "num_ratings",
    "active_installs",
    "downloaded",
    "download_link",
    "icons",
)

# Icon sizes in the order a card prefers them.
ICON_PRIORITY: Tuple[str, ...] = ("svg", "2x", "1x", "default")


class PluginRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    slug: str = ""
    name: str = ""
    version: str = ""
    last_updated: Optional[Union[int, float, str]] = None
    author: str = ""
    short_description: str = ""
    rating: float = Field(default=0.0, ge=0.0, le=100.0)
    num_ratings: int = Field(default=0, ge=0)
    active_installs: int = Field(default=0, ge=0)
    downloaded: int = Field(default=0, ge=0)
    download_link: str = ""
    icons: Dict[str, str] = Field(default_factory=dict)

    def best_icon(self) -> Optional[str]:
        for size in ICON_PRIORITY:
            url = self.icons.get(size)
            if url:
                return url
        return None

    @property
    def is_renderable(self) -> bool:
        return bool(self.slug.strip()) and self.best_icon() is not None
