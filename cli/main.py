"""lecturas CLI — entry-point for the readings service.

Usage:
    python cli/main.py --help

Commands:
    fetch   → fetch and print the readings for a date
    serve   → run the HTTP API with uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from lecturas.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import json
import logging
from typing import Optional

import typer

from lecturas.config import FETCH_MODES, settings
from lecturas.scraper.browser_pool import close_browser_pool
from lecturas.scraper.fetcher import make_transport
from lecturas.scraper.models import ResultEnvelope
from lecturas.service import ReadingsService

from cli.rendering import render_readings

app = typer.Typer(
    name="lecturas",
    help="Lecturas del día (Vatican News) CLI.",
    no_args_is_help=True,
)


async def _fetch(fecha: Optional[str], mode: str) -> ResultEnvelope:
    service = ReadingsService(transport=make_transport(mode))
    try:
        return await service.get_readings(fecha)
    finally:
        await close_browser_pool()


@app.command("fetch")
def fetch(
    fecha: Optional[str] = typer.Option(None, help="Fecha YYYY-MM-DD (default: today)."),
    mode: Optional[str] = typer.Option(
        None, help="Fetch mode: direct | rendered (default: FETCH_MODE)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON envelope."),
) -> None:
    """Fetch the readings for a date and print them."""
    mode = (mode or settings.fetch_mode).lower()
    if mode not in FETCH_MODES:
        typer.echo(f"[fetch] Unknown mode {mode!r}. Use: direct | rendered")
        raise typer.Exit(1)

    envelope = asyncio.run(_fetch(fecha, mode))

    if as_json:
        typer.echo(json.dumps(envelope.to_dict(), ensure_ascii=False, indent=2))
    elif envelope.success:
        typer.echo(render_readings(envelope))
    else:
        typer.echo(f"[fetch] ❌ {envelope.error}")

    if not envelope.success:
        raise typer.Exit(1)


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: API_HOST)."),
    port: Optional[int] = typer.Option(None, help="Port (default: PORT)."),
    reload: bool = typer.Option(False, help="Auto-reload on code changes."),
) -> None:
    """Run the readings HTTP API."""
    import uvicorn

    uvicorn.run(
        "lecturas.api.app:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.callback()
def main() -> None:
    logging.basicConfig(level=settings.log_level)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
