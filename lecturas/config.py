"""Centralised settings for the lecturas service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from the package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

FETCH_MODES = ("direct", "rendered")


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() not in ("0", "false", "no", "")


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Source site
    # ------------------------------------------------------------------
    readings_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "READINGS_BASE_URL", "https://www.vaticannews.va/es/evangelio-de-hoy/"
        )
    )

    # ------------------------------------------------------------------
    # Fetch transport
    # ------------------------------------------------------------------
    fetch_mode: str = field(
        default_factory=lambda: os.environ.get("FETCH_MODE", "direct").strip().lower()
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    navigation_timeout: float = field(
        default_factory=lambda: float(os.environ.get("NAVIGATION_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Remote browser (Browserless) pool
    # ------------------------------------------------------------------
    browserless_token: str = field(
        default_factory=lambda: os.environ.get("BROWSERLESS_TOKEN", "")
    )
    browserless_endpoint: str = field(
        default_factory=lambda: os.environ.get(
            "BROWSERLESS_ENDPOINT", "wss://chrome.browserless.io"
        )
    )
    pool_cooldown: float = field(
        default_factory=lambda: float(os.environ.get("POOL_COOLDOWN", "5.0"))
    )
    local_fallback: bool = field(default_factory=lambda: _flag("LOCAL_FALLBACK", "1"))
    browser_headless: bool = field(default_factory=lambda: _flag("BROWSER_HEADLESS", "1"))

    # ------------------------------------------------------------------
    # HTTP API / logging
    # ------------------------------------------------------------------
    cors_origins: list[str] = field(
        default_factory=lambda: [
            o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()
        ]
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )
    api_host: str = field(default_factory=lambda: os.environ.get("API_HOST", "0.0.0.0"))
    api_port: int = field(default_factory=lambda: int(os.environ.get("PORT", "3000")))


# Module-level singleton — import this everywhere:
#   from lecturas.config import settings
settings = Settings()
