from datetime import datetime, timezone

import pytest

from conftest import FakeResponse, plugin_payload
from src.cards.renderer import AuthorQuery, CardRenderer, parse_slugs
from src.catalog.errors import TransportError
from src.catalog.normalize import normalize_plugin

NOW = datetime(2024, 3, 8, tzinfo=timezone.utc)


class StubClient:
    def __init__(self, slugs=None, authors=None):
        self.slugs = slugs or {}
        self.authors = authors or {}
        self.calls = []

    def _answer(self, table, key):
        value = table[key]
        if isinstance(value, Exception):
            raise value
        return value

    def fetch_by_slug(self, slug):
        self.calls.append(("slug", slug))
        return self._answer(self.slugs, slug)

    def fetch_by_author(self, author):
        self.calls.append(("author", author))
        return self._answer(self.authors, author)


def _record(slug, **overrides):
    return normalize_plugin(plugin_payload(slug, **overrides))


def test_malformed_response_becomes_notice(client, session):
    session.queue(FakeResponse(text="not serialized data"))
    renderer = CardRenderer(client, clock=lambda: NOW)

    html = renderer.render_many(["example-plugin"])

    assert 'class="plugin-info-cards-error"' in html
    assert "example-plugin" in html
    assert "plugin-card " not in html


def test_output_follows_input_order_with_notices_in_place():
    client = StubClient(
        slugs={
            "alpha": _record("alpha"),
            "broken": TransportError("offline", detail="connection refused"),
            "gamma": _record("gamma"),
        },
        authors={"janedev": [_record("by-jane-1"), _record("by-jane-2")]},
    )
    renderer = CardRenderer(client, clock=lambda: NOW)

    html = renderer.render_many([AuthorQuery("janedev"), "alpha", "broken", "gamma"])

    positions = [
        html.index("plugin-card-by-jane-1"),
        html.index("plugin-card-by-jane-2"),
        html.index("plugin-card-alpha"),
        html.index('information for &quot;broken&quot;'),
        html.index("plugin-card-gamma"),
    ]
    assert positions == sorted(positions)


def test_author_failure_notice_names_author():
    client = StubClient(authors={"ghost": TransportError("offline")})
    renderer = CardRenderer(client, clock=lambda: NOW)

    html = renderer.render_many([AuthorQuery("ghost")])

    assert "Unable to fetch plugins by author &quot;ghost&quot;." in html


def test_invalid_record_becomes_notice_and_rendering_continues():
    client = StubClient(slugs={"no-icon": _record("no-icon", icons={}), "alpha": _record("alpha")})
    renderer = CardRenderer(client, clock=lambda: NOW)

    html = renderer.render_many(["no-icon", "alpha"])

    assert "Unable to display plugin &quot;no-icon&quot;." in html
    assert "plugin-card-alpha" in html


def test_render_embed_puts_author_group_first():
    client = StubClient(
        slugs={"alpha": _record("alpha")},
        authors={"janedev": [_record("by-jane")]},
    )
    renderer = CardRenderer(client, clock=lambda: NOW)

    html = renderer.render_embed(" alpha ,, ", author="janedev")

    assert html.startswith('<div class="plugin-info-cards">')
    assert client.calls == [("author", "janedev"), ("slug", "alpha")]
    assert html.index("plugin-card-by-jane") < html.index("plugin-card-alpha")


def test_render_embed_without_identifiers_is_empty_wrapper():
    renderer = CardRenderer(StubClient(), clock=lambda: NOW)
    assert renderer.render_embed("") == '<div class="plugin-info-cards">\n</div>\n'


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("a,b", ["a", "b"]),
        (" a , ,b ", ["a", "b"]),
        (["a", " ", "c"], ["a", "c"]),
        (None, []),
    ],
)
def test_parse_slugs(raw, expected):
    assert parse_slugs(raw) == expected


def test_out_of_range_last_updated_renders_as_unknown():
    client = StubClient(slugs={"big": _record("big", last_updated="99999999999999999999")})
    renderer = CardRenderer(client, clock=lambda: NOW)

    html = renderer.render_many(["big"])

    assert "plugin-card-big" in html
    assert "Unknown" in html


class ExplodingRenderer(CardRenderer):
    def render_card(self, record):
        if record.slug == "bad":
            raise RuntimeError("template blew up")
        return super().render_card(record)


def test_unexpected_errors_become_notices_in_place():
    client = StubClient(
        slugs={"bad": _record("bad"), "alpha": _record("alpha"), "lost": KeyError("lost")},
        authors={"janedev": RuntimeError("cache down")},
    )
    renderer = ExplodingRenderer(client, clock=lambda: NOW)

    html = renderer.render_many([AuthorQuery("janedev"), "bad", "lost", "alpha"])

    positions = [
        html.index("Unable to fetch plugins by author &quot;janedev&quot;."),
        html.index("Unable to display plugin &quot;bad&quot;."),
        html.index("Unable to fetch plugin information for &quot;lost&quot;."),
        html.index("plugin-card-alpha"),
    ]
    assert positions == sorted(positions)
