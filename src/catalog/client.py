"""
Client for the WordPress.org plugin catalog API.

Resolves plugin slugs and author handles into PluginRecords, with a
time-boxed cache in front and an HTTPS -> HTTP fallback underneath.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from src.catalog.errors import CATALOG_FAILURE_MESSAGE, MalformedResponseError, TransportError
from src.catalog.models import PluginRecord
from src.catalog.normalize import normalize_plugin, normalize_plugin_list
from src.utils.config_loader import CardsConfig, FieldSelection

logger = logging.getLogger(__name__)

SLUG_FIELDS = FieldSelection(
    sections=False,
    icons=True,
    active_installs=True,
    versions=False,
    screenshots=False,
    short_description=True,
)

AUTHOR_FIELDS = FieldSelection(
    sections=False,
    icons=True,
    active_installs=True,
    versions=False,
    short_description=True,
)


def flatten_request(args: Dict[str, Any], prefix: str = "request") -> Dict[str, Any]:
    """
    Flatten nested request arguments into bracketed form fields.

    {"slug": "x", "fields": {"icons": 1}} -> {"request[slug]": "x", "request[fields][icons]": 1}
    """
    flat: Dict[str, Any] = {}
    for key, value in args.items():
        name = f"{prefix}[{key}]"
        if isinstance(value, dict):
            flat.update(flatten_request(value, name))
        elif isinstance(value, bool):
            flat[name] = int(value)
        elif value is not None:
            flat[name] = value
    return flat


class CatalogClient:
    """Fetches plugin metadata from the catalog, caching normalized results."""

    def __init__(self, cache, config: Optional[CardsConfig] = None, session: Optional[requests.Session] = None):
        """
        Args:
            cache: Store with get(key) and set(key, value, ttl)
            config: Cards configuration (defaults used when omitted)
            session: Preconfigured requests session, mostly for tests
        """
        self.cache = cache
        self.config = config or CardsConfig()
        self.catalog = self.config.catalog
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session; the HTTP fallback is the only retry"""
        session = requests.Session()
        retry_strategy = Retry(
            connect=0,
            read=0,
            status=0,
            other=0,
            redirect=3,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update({"User-Agent": self.catalog.user_agent})
        return session

    def _cache_key(self, kind: str, identifier: str) -> str:
        return f"{self.config.cache.key_prefix}{kind}:{identifier}"

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def fetch_by_slug(self, slug: str) -> PluginRecord:
        """
        Retrieve a single plugin by slug.

        Raises:
            ValueError: If slug is empty
            TransportError: If neither endpoint could be reached
            MalformedResponseError: If the catalog answer is not a plugin object
        """
        slug = (slug or "").strip()
        if not slug:
            raise ValueError("slug must be a non-empty string")

        key = self._cache_key("plugin", slug)
        cached = self._cache_get(key)
        if isinstance(cached, PluginRecord):
            logger.debug("Cache hit for %s", key)
            return cached

        logger.debug("Cache miss for %s", key)
        result = self.plugins_api(
            {
                "slug": slug,
                "locale": self.catalog.locale,
                "fields": SLUG_FIELDS.as_request(),
            },
            action="plugin_information",
        )
        if not isinstance(result, dict):
            raise MalformedResponseError(
                CATALOG_FAILURE_MESSAGE,
                detail=f"Expected a plugin object for '{slug}', got {type(result).__name__}",
            )

        record = normalize_plugin(result)
        self.cache.set(key, record.model_dump(), self.config.cache.ttl_seconds)
        return record

    def fetch_by_author(self, author: str) -> List[PluginRecord]:
        """
        Retrieve every plugin published by an author.

        Raises:
            ValueError: If author is empty
            TransportError: If neither endpoint could be reached
            MalformedResponseError: If the catalog answer is not an object or array
        """
        author = (author or "").strip()
        if not author:
            raise ValueError("author must be a non-empty string")

        key = self._cache_key("author", author)
        cached = self._cache_get(key)
        if isinstance(cached, list):
            logger.debug("Cache hit for %s", key)
            return cached

        logger.debug("Cache miss for %s", key)
        result = self.plugins_api(
            {
                "author": author,
                "locale": self.catalog.locale,
                "fields": AUTHOR_FIELDS.as_request(),
            },
            action="query_plugins",
        )
        entries = result.get("plugins") if isinstance(result, dict) else result
        records = normalize_plugin_list(entries)
        self.cache.set(key, [record.model_dump() for record in records], self.config.cache.ttl_seconds)
        logger.info(f"Fetched {len(records)} plugins for author '{author}'")
        return records

    def _cache_get(self, key: str) -> Optional[Union[PluginRecord, List[PluginRecord]]]:
        cached = self.cache.get(key)
        if cached is None:
            return None
        try:
            if isinstance(cached, list):
                return [PluginRecord(**item) for item in cached]
            return PluginRecord(**cached)
        except (TypeError, ValidationError) as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            self.cache.delete(key)
            return None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def plugins_api(self, args: Dict[str, Any], action: str = "plugin_information") -> Union[Dict[str, Any], list]:
        """
        POST a request to the catalog and return the decoded object or array.

        HTTPS is tried first when enabled; a transport failure there is
        retried once over plain HTTP with the same body.
        """
        args = dict(args)
        args.setdefault("per_page", self.catalog.per_page)
        body = {"action": action, **flatten_request(args)}

        ssl = self.catalog.prefer_ssl
        url = self.catalog.https_url if ssl else self.catalog.http_url

        try:
            response = self._post(url, body)
        except requests.RequestException as e:
            if not ssl:
                raise self._transport_error(e) from e
            logger.warning(f"HTTPS request to {url} failed ({e}); falling back to HTTP")
            try:
                response = self._post(self.catalog.http_url, body)
            except requests.RequestException as fallback_error:
                raise self._transport_error(fallback_error) from fallback_error

        return self._decode(response)

    def _post(self, url: str, body: Dict[str, Any]) -> requests.Response:
        logger.debug(f"POST {url} action={body.get('action')}")
        return self.session.post(url, data=body, timeout=self.catalog.timeout)

    @staticmethod
    def _transport_error(error: Exception) -> TransportError:
        logger.error(f"Plugin catalog request failed: {error}")
        return TransportError(CATALOG_FAILURE_MESSAGE, detail=str(error))

    @staticmethod
    def _decode(response: requests.Response) -> Union[Dict[str, Any], list]:
        body = response.text
        try:
            data = response.json()
        except ValueError:
            data = None

        if not isinstance(data, (dict, list)):
            raise MalformedResponseError(CATALOG_FAILURE_MESSAGE, detail=body)

        # Unknown slugs come back as {"error": "Plugin not found."}
        if isinstance(data, dict) and set(data) == {"error"}:
            raise MalformedResponseError(CATALOG_FAILURE_MESSAGE, detail=str(data["error"]), payload=data)

        return data
