"""Tests for the lecturas CLI."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from cli.main import app
from lecturas.scraper.errors import FetchFailed
from lecturas.scraper.models import RawPage

runner = CliRunner()

_HTML = """\
<div class="indicazioneLiturgica">Navidad</div>
<section class="section--evidence">
  <h2>Evangelio del Día</h2>
  <p>intro</p><p>Juan 1, 1-18</p><p>En el principio existía el Verbo.</p>
</section>
"""


class FakeTransport:
    failure_hint = None

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error

    async def fetch(self, url: str) -> RawPage:
        if self.error is not None:
            raise self.error
        return RawPage(url=url, html=_HTML, status_code=200)


@pytest.fixture
def transport(monkeypatch):
    """Route the CLI's transport factory to a fake."""
    fake = FakeTransport()
    monkeypatch.setattr("cli.main.make_transport", lambda mode: fake)
    return fake


def test_fetch_renders_readings(transport):
    result = runner.invoke(app, ["fetch", "--fecha", "2025-12-25", "--mode", "direct"])

    assert result.exit_code == 0
    assert "Navidad" in result.stdout
    assert "Juan 1, 1-18" in result.stdout
    assert "(no disponible)" in result.stdout


def test_fetch_json(transport):
    result = runner.invoke(app, ["fetch", "--fecha", "2025-12-25", "--json"])

    assert result.exit_code == 0
    body = json.loads(result.stdout)
    assert body["success"] is True
    assert body["url"].endswith("2025/12/25.html")
    assert body["lecturas"]["evangelio"]["cita"] == "Juan 1, 1-18"


def test_fetch_failure_exits_nonzero(transport):
    transport.error = FetchFailed("Error al obtener la página: 503", status_code=503)

    result = runner.invoke(app, ["fetch", "--fecha", "2025-12-25"])

    assert result.exit_code == 1
    assert "503" in result.stdout


def test_fetch_invalid_date_exits_nonzero(transport):
    result = runner.invoke(app, ["fetch", "--fecha", "25/12/2025"])

    assert result.exit_code == 1
    assert "Formato de fecha inválido" in result.stdout


def test_unknown_mode_rejected(transport):
    result = runner.invoke(app, ["fetch", "--mode", "ftp"])

    assert result.exit_code == 1
    assert "Unknown mode" in result.stdout
