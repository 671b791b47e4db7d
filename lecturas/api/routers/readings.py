"""Readings endpoints.

Routes
------
GET /api/lecturas?fecha=YYYY-MM-DD    fecha optional (today when omitted)
GET /api/lecturas/{fecha}
GET /api/health
GET /api/help

A failure envelope is returned with status 404; success with 200.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

router = APIRouter()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _readings_response(request: Request, fecha: Optional[str]) -> JSONResponse:
    service = request.app.state.service
    envelope = await service.get_readings(fecha)
    status_code = 200 if envelope.success else 404
    return JSONResponse(status_code=status_code, content=envelope.to_dict())


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/lecturas")
async def get_lecturas(
    request: Request,
    fecha: Optional[str] = Query(None, description="Fecha en formato YYYY-MM-DD."),
) -> JSONResponse:
    """Return the day's readings for ``fecha`` (defaults to today)."""
    return await _readings_response(request, fecha)


@router.get("/lecturas/{fecha}")
async def get_lecturas_by_path(fecha: str, request: Request) -> JSONResponse:
    """Same as ``GET /lecturas`` with the date in the path."""
    return await _readings_response(request, fecha)


@router.get("/health")
async def health() -> dict[str, str]:
    """Lightweight health endpoint that never touches the source site."""
    return {"status": "ok"}


@router.get("/help")
async def help_() -> dict[str, Any]:
    return {
        "nombre": "API Evangelio del Día",
        "descripcion": "Extrae las lecturas del día desde Vatican News",
        "endpoints": {
            "lecturas": {
                "url": "/api/lecturas",
                "metodo": "GET",
                "parametros": {
                    "fecha": "Opcional. Formato: YYYY-MM-DD. "
                    "Si no se proporciona, usa la fecha actual."
                },
                "ejemplo": "GET /api/lecturas?fecha=2025-12-03",
            },
            "health": {
                "url": "/api/health",
                "metodo": "GET",
                "descripcion": "Verifica que el servidor está activo",
            },
        },
    }
