"""
Configuration loader for plugin info cards
"""

import os
import yaml
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, ValidationError
import logging

logger = logging.getLogger(__name__)


class FieldSelection(BaseModel):
    """Fields the catalog should (or should not) include in its answer"""

    short_description: bool = True
    description: bool = False
    sections: bool = False
    tested: bool = True
    requires: bool = True
    rating: bool = True
    ratings: bool = True
    downloaded: bool = True
    downloadlink: bool = True
    last_updated: bool = True
    added: bool = True
    tags: bool = True
    compatibility: bool = True
    homepage: bool = True
    versions: bool = False
    donate_link: bool = True
    reviews: bool = False
    banners: bool = False
    icons: bool = False
    active_installs: bool = False
    group: bool = False
    contributors: bool = False
    screenshots: bool = False

    def as_request(self) -> dict[str, int]:
        """Flags in the 0/1 form the catalog expects"""
        return {name: int(value) for name, value in self.model_dump().items()}


class CatalogConfig(BaseModel):
    """Remote plugin catalog configuration"""

    endpoint: str = "api.wordpress.org/plugins/info/1.2/"
    site_host: str = "wordpress.org"
    prefer_ssl: bool = True
    timeout: float = Field(default=15.0, gt=0.0, le=120.0)
    per_page: int = Field(default=24, ge=1, le=250)
    locale: str = "en_US"
    user_agent: str = "plugin-info-cards/1.0 (+https://wordpress.org/plugins/)"

    @property
    def https_url(self) -> str:
        return f"https://{self.endpoint.lstrip('/')}"

    @property
    def http_url(self) -> str:
        return f"http://{self.endpoint.lstrip('/')}"


class CacheConfig(BaseModel):
    """Cache configuration"""

    ttl_seconds: int = Field(default=3600, ge=1)
    # Namespace prepended to "plugin:<slug>" / "author:<author>" keys
    key_prefix: str = ""


class RenderConfig(BaseModel):
    """Card rendering configuration"""

    wrapper_class: str = "plugin-info-cards"


class CardsConfig(BaseModel):
    """Complete plugin info cards configuration"""

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)


def default_config_path() -> Path:
    override = os.getenv("CARDS_CONFIG")
    if override:
        return Path(override)
    return Path(__file__).parent.parent.parent / "config" / "cards_config.yml"


def load_cards_config(config_path: Optional[Path] = None) -> CardsConfig:
    """
    Load and validate cards configuration from YAML file

    Args:
        config_path: Path to config file. Defaults to $CARDS_CONFIG or config/cards_config.yml

    Returns:
        Validated CardsConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        config_path = default_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    try:
        config = CardsConfig(**config_data)
        logger.info(f"Successfully loaded config from {config_path}")
        return config
    except ValidationError as e:
        logger.error(f"Config validation failed: {e}")
        raise
