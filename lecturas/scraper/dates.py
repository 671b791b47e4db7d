"""Date handling: request date → source-site URL.

The site publishes each day's readings under ``/{YYYY}/{MM}/{DD}.html``.
The requested date maps to its own path; no day offset is applied.
"""

from __future__ import annotations

from datetime import date, datetime

from lecturas.scraper.errors import InvalidDateFormat

DATE_FORMAT = "%Y-%m-%d"


def parse_reading_date(value: object) -> date:
    """Parse a ``YYYY-MM-DD`` string into a :class:`date`.

    Raises:
        InvalidDateFormat: If *value* is not a string in that exact format or
            names a day that does not exist (e.g. ``2025-02-30``).
    """
    if not isinstance(value, str):
        raise InvalidDateFormat(value)
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidDateFormat(value) from exc


def format_url_path(day: date) -> str:
    """Return the zero-padded ``YYYY/MM/DD`` path segment for *day*."""
    return f"{day.year:04d}/{day.month:02d}/{day.day:02d}"


def build_readings_url(day: date, base_url: str) -> str:
    """Join *base_url* and the path segment for *day* into the page URL."""
    return f"{base_url.rstrip('/')}/{format_url_path(day)}.html"
