"""
Number, date and rating formatting used by the card renderer.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Tuple, Union

MINUTE_IN_SECONDS = 60
HOUR_IN_SECONDS = 60 * MINUTE_IN_SECONDS
DAY_IN_SECONDS = 24 * HOUR_IN_SECONDS
WEEK_IN_SECONDS = 7 * DAY_IN_SECONDS
MONTH_IN_SECONDS = 30 * DAY_IN_SECONDS
YEAR_IN_SECONDS = 365 * DAY_IN_SECONDS

ONE_MILLION = 1_000_000

# Formats the catalog has used for last_updated, newest first.
_TIMESTAMP_FORMATS = (
    "%Y-%m-%d %I:%M%p GMT",
    "%Y-%m-%d %I:%M%p %Z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
)


def round_half_up(value: float, places: int = 0) -> float:
    """Round half away from zero (0.5 -> 1, -0.5 -> -1)."""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(exponent, rounding=ROUND_HALF_UP))


def number_format(number: Union[int, float], decimals: int = 0) -> str:
    """Group thousands with commas and fix the number of decimals."""
    if decimals <= 0:
        return f"{int(round_half_up(number)):,}"
    return f"{round_half_up(number, decimals):,.{decimals}f}"


def parse_rating(rating: Any) -> float:
    """Accept numbers or strings using a comma decimal separator."""
    if rating is None or rating == "":
        return 0.0
    if isinstance(rating, str):
        rating = rating.replace(",", ".").strip()
    return float(rating)


def star_counts(rating: Any, rating_kind: str = "rating") -> Tuple[float, int, int, int]:
    """
    Split a rating into (scaled, full, half, empty) stars on a 0..5 scale.

    Percent ratings are first rounded to the nearest 10% and then halved, so
    they always land on a half-star step.
    """
    value = parse_rating(rating)
    if rating_kind == "percent":
        value = round_half_up(value / 10) / 2
    elif rating_kind not in ("rating", "raw"):
        raise ValueError(f"Unknown rating kind: {rating_kind!r}")

    value = min(max(value, 0.0), 5.0)
    full_stars = math.floor(value)
    half_stars = math.ceil(value - full_stars)
    empty_stars = 5 - full_stars - half_stars
    return value, full_stars, half_stars, empty_stars


def format_count(count: int, suffix: str = "") -> str:
    """
    Three-tier display for install/download counts.

    >= 1 million -> "1+ Million", 0 -> "Less Than 10", otherwise the
    grouped number followed by `suffix`.
    """
    if count >= ONE_MILLION:
        return "1+ Million"
    if count == 0:
        return "Less Than 10"
    return f"{number_format(count)}{suffix}"


def _from_epoch(seconds: float) -> Optional[datetime]:
    # Out of range for the platform clock, or NaN
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse the catalog's last_updated value into an aware UTC datetime."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return _from_epoch(value)

    text = str(value).strip()
    if text.lstrip("-").isdigit():
        return _from_epoch(int(text))

    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def human_time_diff(start: datetime, end: Optional[datetime] = None) -> str:
    """Difference between two datetimes as "5 mins", "2 days", "1 year" etc."""
    if end is None:
        end = datetime.now(timezone.utc)
    diff = abs((end - start).total_seconds())

    if diff < HOUR_IN_SECONDS:
        mins = max(int(round_half_up(diff / MINUTE_IN_SECONDS)), 1)
        return _plural(mins, "min", "mins")
    if diff < DAY_IN_SECONDS:
        hours = max(int(round_half_up(diff / HOUR_IN_SECONDS)), 1)
        return _plural(hours, "hour", "hours")
    if diff < WEEK_IN_SECONDS:
        days = max(int(round_half_up(diff / DAY_IN_SECONDS)), 1)
        return _plural(days, "day", "days")
    if diff < MONTH_IN_SECONDS:
        weeks = max(int(round_half_up(diff / WEEK_IN_SECONDS)), 1)
        return _plural(weeks, "week", "weeks")
    if diff < YEAR_IN_SECONDS:
        months = max(int(round_half_up(diff / MONTH_IN_SECONDS)), 1)
        return _plural(months, "month", "months")
    years = max(int(round_half_up(diff / YEAR_IN_SECONDS)), 1)
    return _plural(years, "year", "years")
