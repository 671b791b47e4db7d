"""Tests for date parsing and URL mapping."""

from __future__ import annotations

from datetime import date

import pytest

from lecturas.scraper.dates import build_readings_url, format_url_path, parse_reading_date
from lecturas.scraper.errors import InvalidDateFormat

_BASE = "https://www.vaticannews.va/es/evangelio-de-hoy/"


class TestParseReadingDate:
    def test_valid_date(self) -> None:
        assert parse_reading_date("2025-12-03") == date(2025, 12, 3)

    def test_surrounding_whitespace_tolerated(self) -> None:
        assert parse_reading_date(" 2025-01-09\n") == date(2025, 1, 9)

    @pytest.mark.parametrize(
        "value", ["not-a-date", "", "2025/12/03", "03-12-2025", "2025-02-30", "2025-13-01"]
    )
    def test_invalid_strings_rejected(self, value: str) -> None:
        with pytest.raises(InvalidDateFormat) as exc_info:
            parse_reading_date(value)
        assert "Formato de fecha inválido" in str(exc_info.value)
        assert "YYYY-MM-DD" in str(exc_info.value)

    def test_non_string_rejected(self) -> None:
        with pytest.raises(InvalidDateFormat):
            parse_reading_date(20251203)  # type: ignore[arg-type]


class TestFormatUrlPath:
    def test_zero_pads_month_and_day(self) -> None:
        assert format_url_path(date(2025, 1, 5)) == "2025/01/05"

    def test_two_digit_month_and_day(self) -> None:
        assert format_url_path(date(2024, 12, 31)) == "2024/12/31"


class TestBuildReadingsUrl:
    def test_requested_date_maps_to_its_own_path(self) -> None:
        url = build_readings_url(date(2025, 12, 31), _BASE)
        assert url == "https://www.vaticannews.va/es/evangelio-de-hoy/2025/12/31.html"

    def test_base_without_trailing_slash(self) -> None:
        url = build_readings_url(date(2026, 2, 1), _BASE.rstrip("/"))
        assert url == "https://www.vaticannews.va/es/evangelio-de-hoy/2026/02/01.html"
