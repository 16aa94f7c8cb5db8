"""Pytest fixtures for catalog client and card renderer tests."""

import json
from typing import Any, List

import pytest
import requests

from src.catalog.client import CatalogClient
from src.database.redis import RedisCache
from src.utils.config_loader import CardsConfig


class FakeResponse:
    def __init__(self, body: Any = None, text: str = None, status_code: int = 200):
        self.text = text if text is not None else json.dumps(body)
        self.status_code = status_code

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Replays queued outcomes (responses or exceptions) for each POST."""

    def __init__(self, outcomes: List[Any] = None):
        self.outcomes = list(outcomes or [])
        self.calls = []

    def queue(self, *outcomes):
        self.outcomes.extend(outcomes)

    def post(self, url, data=None, timeout=None):
        self.calls.append({"url": url, "data": dict(data or {}), "timeout": timeout})
        if not self.outcomes:
            raise AssertionError(f"Unexpected request to {url}")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def plugin_payload(slug: str = "example-plugin", **overrides):
    payload = {
        "name": "Example Plugin",
        "slug": slug,
        "version": "1.2.3",
        "author": '<a href="https://example.com/">Jane Dev</a>',
        "author_profile": "https://profiles.wordpress.org/janedev/",
        "requires": "6.0",
        "tested": "6.5",
        "rating": 92,
        "ratings": {"5": 40, "4": 3, "3": 1, "2": 0, "1": 1},
        "num_ratings": 45,
        "active_installs": 20000,
        "downloaded": 123456,
        "last_updated": "2024-03-05 4:12pm GMT",
        "added": "2019-01-01",
        "homepage": "https://example.com/",
        "short_description": "Does <strong>example</strong> things.",
        "download_link": f"https://downloads.wordpress.org/plugin/{slug}.1.2.3.zip",
        "tags": {"example": "example"},
        "donate_link": "",
        "icons": {
            "2x": f"https://ps.w.org/{slug}/assets/icon-256x256.png",
            "1x": f"https://ps.w.org/{slug}/assets/icon-128x128.png",
        },
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """In-memory TTL cache driven by a fake clock."""
    return RedisCache(clock=clock)


@pytest.fixture
def config():
    return CardsConfig()


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(cache, config, session):
    return CatalogClient(cache, config, session=session)


@pytest.fixture
def connection_error():
    return requests.ConnectionError("TLS handshake failed")
