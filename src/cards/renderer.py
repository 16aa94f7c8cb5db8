"""
Render plugin info cards as HTML fragments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from html import escape
from typing import Callable, Iterable, List, Optional, Sequence, Union

from src.cards.formatting import format_count, human_time_diff, number_format, parse_timestamp, star_counts
from src.cards.sanitize import kses, sanitize_key, strip_tags
from src.catalog.errors import CatalogError, RecordValidationError
from src.catalog.models import PluginRecord

logger = logging.getLogger(__name__)

STAR_FULL = '<div class="star star-full" aria-hidden="true"></div>'
STAR_HALF = '<div class="star star-half" aria-hidden="true"></div>'
STAR_EMPTY = '<div class="star star-empty" aria-hidden="true"></div>'

CARD_TEMPLATE = """<div class="plugin-card plugin-card-{slug_class}">
	<div class="plugin-card-top">
		<div class="name column-name">
			<h3>
				<a href="{details_url}" class="open-plugin-details-modal">
					{name} <span class="plugin-version">{version}</span>
					<img src="{icon}" class="plugin-icon" alt="">
				</a>
			</h3>
		</div>
		<div class="action-links">
			<ul class="plugin-action-buttons">{action_links}</ul>
		</div>
		<div class="desc column-description">
			<p>{description}</p>
			<p class="authors"> <cite>By {author}</cite></p>
		</div>
	</div>
	<div class="plugin-card-bottom">
		<div class="vers column-rating">
			{star_rating}
			<span class="num-ratings" aria-hidden="true">({num_ratings})</span>
		</div>
		<div class="column-updated">
			<strong>Last Updated:</strong> {last_updated}
		</div>
		<div class="column-downloaded">
			{active_installs} Active Installations
		</div>
		<div class="column-downloads">
			{downloaded} Downloads
		</div>
	</div>
</div>
"""


@dataclass(frozen=True)
class AuthorQuery:
    """Marks an identifier as an author handle rather than a plugin slug."""

    author: str


Identifier = Union[str, AuthorQuery]


def parse_slugs(slugs: Union[str, Iterable[str], None]) -> List[str]:
    """Split "a, b,,c" (or a sequence) into clean slugs, keeping order."""
    if not slugs:
        return []
    if isinstance(slugs, str):
        slugs = slugs.split(",")
    return [slug.strip() for slug in slugs if slug and slug.strip()]


def render_star_rating(rating, rating_kind: str = "rating", num_ratings: int = 0) -> str:
    """
    HTML star rating on a 0..5 scale in half star steps.

    Args:
        rating: 0..5 value, or 0..100 when rating_kind is "percent"; strings
            with a comma decimal separator are accepted
        rating_kind: "rating" (or "raw") for 0..5, "percent" for 0..100
        num_ratings: Number of ratings behind the value, shown in the title

    Returns:
        Markup with a screen reader title followed by full/half/empty stars
    """
    scaled, full_stars, half_stars, empty_stars = star_counts(rating, rating_kind)

    if num_ratings:
        noun = "rating" if num_ratings == 1 else "ratings"
        title = f"{number_format(scaled, 1)} rating based on {number_format(num_ratings)} {noun}"
    else:
        title = f"{number_format(scaled, 1)} rating"

    return (
        '<div class="star-rating">'
        f'<span class="screen-reader-text">{escape(title)}</span>'
        + STAR_FULL * full_stars
        + STAR_HALF * half_stars
        + STAR_EMPTY * empty_stars
        + "</div>"
    )


class CardRenderer:
    """Turns catalog records into plugin cards."""

    def __init__(
        self,
        client,
        site_host: str = "wordpress.org",
        wrapper_class: str = "plugin-info-cards",
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.client = client
        self.site_host = site_host
        self.wrapper_class = wrapper_class
        self.clock = clock

    @classmethod
    def from_config(cls, client, config) -> "CardRenderer":
        return cls(
            client,
            site_host=config.catalog.site_host,
            wrapper_class=config.render.wrapper_class,
        )

    def details_url(self, slug: str) -> str:
        return f"https://{self.site_host}/plugins/{slug}"

    def render_card(self, record: PluginRecord) -> str:
        """
        Render one record.

        Raises:
            RecordValidationError: If the record has no slug or no icon
        """
        slug = record.slug.strip()
        if not slug:
            raise RecordValidationError("Plugin record has no slug.", payload=record.model_dump())
        icon = record.best_icon()
        if not icon:
            raise RecordValidationError(f"Plugin '{slug}' has no icons.", detail=slug)

        name = strip_tags(record.name)
        label = strip_tags(f"{record.name} {record.version}")
        details_url = self.details_url(slug)

        download_link = (
            f'<a class="install-now button" data-slug="{escape(sanitize_key(slug))}" '
            f'href="{escape(record.download_link)}" '
            f'aria-label="{escape(f"Download {label} now")}" '
            f'data-name="{escape(name)}">Download</a>'
        )
        details_link = (
            f'<a href="{escape(details_url)}" class="open-plugin-details-modal" '
            f'aria-label="{escape(f"More information about {label}")}" '
            f'data-title="{escape(label)}">More Details</a>'
        )
        action_links = f"<li>{download_link}</li><li>{details_link}</li>"

        return CARD_TEMPLATE.format(
            slug_class=escape(sanitize_key(slug) or slug),
            details_url=escape(details_url),
            name=escape(name),
            version=kses(record.version),
            icon=escape(icon),
            action_links=action_links,
            description=escape(strip_tags(record.short_description)),
            author=kses(record.author),
            star_rating=render_star_rating(record.rating, "percent", record.num_ratings),
            num_ratings=escape(number_format(record.num_ratings)),
            last_updated=escape(self._last_updated(record)),
            active_installs=escape(format_count(record.active_installs, "+")),
            downloaded=escape(format_count(record.downloaded)),
        )

    def _last_updated(self, record: PluginRecord) -> str:
        updated = parse_timestamp(record.last_updated)
        if updated is None:
            return "Unknown"
        return f"{human_time_diff(updated, self.clock())} ago"

    def render_many(self, identifiers: Sequence[Identifier]) -> str:
        """
        Render every identifier in order, replacing failures with notices.

        Never raises. Catalog and validation errors, and anything unexpected
        while fetching or rendering one identifier, become an inline notice
        at the position of the identifier that caused it.
        """
        fragments: List[str] = []
        for identifier in identifiers:
            if isinstance(identifier, AuthorQuery):
                fragments.extend(self._render_author(identifier.author))
            else:
                fragments.append(self._render_slug(identifier))
        return "".join(fragments)

    def _render_author(self, author: str) -> List[str]:
        try:
            records = self.client.fetch_by_author(author)
        except (CatalogError, ValueError) as e:
            logger.warning(f"Could not fetch plugins for author '{author}': {e}")
            return [self.failure_notice(f'Unable to fetch plugins by author "{author}".')]
        except Exception as e:
            logger.exception(f"Unexpected error fetching plugins for author '{author}': {e}")
            return [self.failure_notice(f'Unable to fetch plugins by author "{author}".')]
        return [self._render_record(record, record.slug) for record in records]

    def _render_slug(self, slug: str) -> str:
        try:
            record = self.client.fetch_by_slug(slug)
        except (CatalogError, ValueError) as e:
            logger.warning(f"Could not fetch plugin '{slug}': {e}")
            return self.failure_notice(f'Unable to fetch plugin information for "{slug}".')
        except Exception as e:
            logger.exception(f"Unexpected error fetching plugin '{slug}': {e}")
            return self.failure_notice(f'Unable to fetch plugin information for "{slug}".')
        return self._render_record(record, slug)

    def _render_record(self, record: PluginRecord, identifier: str) -> str:
        try:
            return self.render_card(record)
        except RecordValidationError as e:
            logger.warning(f"Skipping invalid plugin record '{identifier}': {e}")
            return self.failure_notice(f'Unable to display plugin "{identifier}".')
        except Exception as e:
            logger.exception(f"Unexpected error rendering plugin '{identifier}': {e}")
            return self.failure_notice(f'Unable to display plugin "{identifier}".')

    @staticmethod
    def failure_notice(message: str) -> str:
        return f'<p class="plugin-info-cards-error">{escape(message)}</p>\n'

    def render_embed(self, slugs: Union[str, Iterable[str], None] = None, author: Optional[str] = None) -> str:
        """
        Entry point for embedding: an optional author group, then the slugs.
        """
        identifiers: List[Identifier] = []
        if author and author.strip():
            identifiers.append(AuthorQuery(author.strip()))
        identifiers.extend(parse_slugs(slugs))
        inner = self.render_many(identifiers)
        return f'<div class="{escape(self.wrapper_class)}">\n{inner}</div>\n'
