"""
Real Redis-backed cache for production when REDIS_URL is set.
Implements the same interface as src.database.redis (in-memory stub).
"""

from __future__ import annotations

import json
from typing import Any, Optional

import redis


class RedisCache:
    """
    Redis-backed TTL cache. Use when REDIS_URL is set in production.
    """

    def __init__(self, url: str, default_ttl: int = 3600, client: Any = None) -> None:
        self._client = client if client is not None else redis.from_url(url, decode_responses=True)
        self._default_ttl = default_ttl

    def get(self, key: str) -> Optional[Any]:
        raw = self._client.get(key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return None

    def set(self, key: str, value: Any, ttl: int) -> None:
        payload = json.dumps(value, default=str)
        self._client.setex(key, ttl or self._default_ttl, payload)

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def ping(self) -> bool:
        try:
            return self._client.ping()
        except redis.RedisError:
            return False
