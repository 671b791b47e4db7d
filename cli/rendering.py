"""Utilities for rendering readings in the CLI."""

from __future__ import annotations

import textwrap
from typing import List

from lecturas.scraper.models import ExtractedReading, ResultEnvelope


def _render_reading(label: str, icon: str, reading: ExtractedReading, width: int) -> List[str]:
    lines = [f"{icon} {label}"]
    if reading.cita is None:
        lines.append("    (no disponible)")
        return lines
    lines.append(f"    {reading.cita}")
    if reading.lectura:
        lines.append("")
        lines.extend(
            textwrap.wrap(
                reading.lectura,
                width=width,
                initial_indent="    ",
                subsequent_indent="    ",
            )
        )
    return lines


def render_readings(envelope: ResultEnvelope, width: int = 88) -> str:
    """Render a success envelope as plain text.

    Args:
        envelope: A successful :class:`ResultEnvelope`.
        width: Wrap width for the reading bodies.

    Returns:
        Multi-line string ready for ``typer.echo``.
    """
    lecturas = envelope.lecturas
    lines = [f"📅 {envelope.fecha}  {envelope.url}"]
    if lecturas is None:
        return "\n".join(lines)

    if lecturas.indicacion_liturgica:
        lines.append(f"✝️  {lecturas.indicacion_liturgica}")
    lines.append("")
    lines.extend(_render_reading("Lectura del Día", "📖", lecturas.primera_lectura, width))
    lines.append("")
    lines.extend(_render_reading("Evangelio del Día", "✨", lecturas.evangelio, width))
    return "\n".join(lines)
