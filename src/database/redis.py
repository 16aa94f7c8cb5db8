"""
Lightweight in-memory RedisCache replacement for local development.

Implements the same time-boxed get/set interface as
src.database.redis_real so the catalog client can run without a real
Redis instance. Entries expire after their TTL; there is no size bound.
"""

from __future__ import annotations

import copy
import time
from typing import Any, Callable, Dict, Optional


class RedisCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        # key -> {"expires": float, "value": Any}
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        item = self._entries.get(key)
        if not item:
            return None
        if self._clock() >= item["expires"]:
            self._entries.pop(key, None)
            return None
        return copy.deepcopy(item["value"])

    def set(self, key: str, value: Any, ttl: int) -> None:
        self._entries[key] = {"expires": self._clock() + ttl, "value": copy.deepcopy(value)}

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def ping(self) -> bool:
        """
        Health checks call this; always True for the in-memory store.
        """
        return True
