"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from lecturas.api import app

    uvicorn lecturas.api:app --reload
"""

from lecturas.api.app import app

__all__ = ["app"]
