"""Readings service: date → URL → fetch → extract → result envelope.

:meth:`ReadingsService.get_readings` never raises; every failure becomes a
failure envelope carrying the error message and the requested date.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from lecturas.config import settings
from lecturas.scraper.dates import build_readings_url, parse_reading_date
from lecturas.scraper.errors import ReadingsError
from lecturas.scraper.extractor import extract_readings
from lecturas.scraper.fetcher import Transport, make_transport
from lecturas.scraper.models import ResultEnvelope

logger = logging.getLogger("lecturas.service")


class ReadingsService:
    def __init__(
        self,
        transport: Optional[Transport] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self._transport = transport or make_transport()
        self._base_url = base_url or settings.readings_base_url

    async def get_readings(self, fecha: Optional[str] = None) -> ResultEnvelope:
        """Return the readings for *fecha* (``YYYY-MM-DD``; today in UTC when empty)."""
        if not fecha:
            fecha = datetime.now(timezone.utc).date().isoformat()

        try:
            day = parse_reading_date(fecha)
            url = build_readings_url(day, self._base_url)
            logger.info("Fetching readings for %s from %s", fecha, url)
            raw = await self._transport.fetch(url)
            lecturas = extract_readings(raw.html)
        except ReadingsError as exc:
            logger.error("Readings request for %r failed: %s", fecha, exc)
            return ResultEnvelope.failure(fecha, str(exc), self._transport.failure_hint)
        except Exception as exc:
            logger.exception("Unexpected error fetching readings for %r", fecha)
            return ResultEnvelope.failure(
                fecha, str(exc) or "Error desconocido", self._transport.failure_hint
            )

        return ResultEnvelope.ok(fecha, url, lecturas)


_service: Optional[ReadingsService] = None


def get_readings_service() -> ReadingsService:
    """Return the process-wide service built from ``settings``."""
    global _service
    if _service is None:
        _service = ReadingsService()
    return _service
