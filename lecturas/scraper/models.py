"""Data models for the readings pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class RawPage:
    """The fetched HTML for a single URL."""

    url: str
    html: str
    status_code: int


@dataclass(frozen=True)
class ExtractedReading:
    """A scripture reading: its citation plus the concatenated body text."""

    cita: Optional[str] = None
    lectura: Optional[str] = None

    def to_dict(self) -> dict[str, Optional[str]]:
        return {"cita": self.cita, "lectura": self.lectura}


@dataclass(frozen=True)
class ReadingsResult:
    """Liturgical day label plus the first reading and the gospel."""

    indicacion_liturgica: Optional[str] = None
    primera_lectura: ExtractedReading = field(default_factory=ExtractedReading)
    evangelio: ExtractedReading = field(default_factory=ExtractedReading)

    def to_dict(self) -> dict[str, Any]:
        return {
            "indicacionLiturgica": self.indicacion_liturgica,
            "primeraLectura": self.primera_lectura.to_dict(),
            "evangelio": self.evangelio.to_dict(),
        }


@dataclass
class ResultEnvelope:
    """Outcome of a readings request: either full success or a failure.

    Use :meth:`ok` and :meth:`failure` rather than the constructor.
    """

    success: bool
    fecha: Optional[str]
    url: Optional[str] = None
    lecturas: Optional[ReadingsResult] = None
    error: Optional[str] = None
    hint: Optional[str] = None

    @classmethod
    def ok(cls, fecha: str, url: str, lecturas: ReadingsResult) -> "ResultEnvelope":
        return cls(success=True, fecha=fecha, url=url, lecturas=lecturas)

    @classmethod
    def failure(
        cls, fecha: Optional[str], error: str, hint: Optional[str] = None
    ) -> "ResultEnvelope":
        return cls(success=False, fecha=fecha, error=error, hint=hint)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape served to clients."""
        if self.success:
            return {
                "success": True,
                "fecha": self.fecha,
                "url": self.url,
                "lecturas": (self.lecturas or ReadingsResult()).to_dict(),
            }
        payload: dict[str, Any] = {
            "success": False,
            "error": self.error,
            "fecha": self.fecha,
        }
        if self.hint:
            payload["hint"] = self.hint
        return payload
