"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from monojar.api import app

    uvicorn monojar.api:app
"""

from monojar.api.app import app, create_app

__all__ = ["app", "create_app"]
