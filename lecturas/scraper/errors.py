"""Error kinds raised by the readings pipeline.

Every error carries a human-readable Spanish message; the service layer
turns them into failure envelopes.
"""

from __future__ import annotations

from typing import Optional


class ReadingsError(Exception):
    """Base class for every failure of the readings pipeline."""


class InvalidDateFormat(ReadingsError):
    """The requested date is not a valid ``YYYY-MM-DD`` string."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Formato de fecha inválido ({value!r}). Use YYYY-MM-DD")


class FetchFailed(ReadingsError):
    """The source page could not be retrieved (non-2xx or transport error)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class FetchTimeout(ReadingsError):
    """Fetching or navigating to the source page exceeded its time bound."""


class ConnectionCoolingDown(ReadingsError):
    """A recent remote-browser failure blocks reconnection for now."""


class ConnectionFailed(ReadingsError):
    """Connecting to the remote browser service failed."""


class FallbackFailed(ReadingsError):
    """Both the remote browser and the local fallback browser failed."""

    def __init__(self, original: str, fallback: str) -> None:
        self.original = original
        self.fallback = fallback
        super().__init__(
            "No se pudo conectar a Browserless ni al navegador local. "
            f"Error: {original} | Fallback: {fallback}"
        )
