"""Scraper package — date mapping, page fetch & readings extraction."""

from lecturas.scraper.dates import build_readings_url, parse_reading_date
from lecturas.scraper.extractor import extract_readings
from lecturas.scraper.fetcher import DirectTransport, RenderedTransport, make_transport
from lecturas.scraper.models import ExtractedReading, RawPage, ReadingsResult, ResultEnvelope

__all__ = [
    "build_readings_url",
    "parse_reading_date",
    "extract_readings",
    "DirectTransport",
    "RenderedTransport",
    "make_transport",
    "ExtractedReading",
    "RawPage",
    "ReadingsResult",
    "ResultEnvelope",
]
