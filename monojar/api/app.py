"""FastAPI application factory.

State
-----
``create_app`` attaches three objects to ``app.state``:

    settings  — the :class:`~monojar.config.Settings` in use
    parser    — a shared :class:`~monojar.scraper.JarParser` (stateless)
    cache     — the per-URL result cache (``CACHE_TTL`` seconds)

Routers
-------
    /api  — jar parsing and health endpoints
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from monojar.config import Settings, configure_logging, settings as default_settings
from monojar.api.cache import ResultCache
from monojar.api.routers import jar as jar_router
from monojar.scraper.errors import JarParseError
from monojar.scraper.pipeline import JarParser

logger = logging.getLogger(__name__)


async def _jar_parse_error_handler(request: Request, exc: JarParseError) -> JSONResponse:
    """Render any pipeline failure as a short 500 payload (no traceback)."""
    message = str(exc).splitlines()[0] if str(exc) else exc.kind
    logger.error("[API] %s %s failed (%s): %s", request.method, request.url.path, exc.kind, message)
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to parse page", "message": message, "kind": exc.kind},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(
        title="monojar API",
        description=(
            "Scrapes a public Monobank donation jar page with a headless "
            "browser and returns its title, collected amount and target."
        ),
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.parser = JarParser(settings)
    app.state.cache = ResultCache(settings.cache_ttl)

    app.add_exception_handler(JarParseError, _jar_parse_error_handler)
    app.include_router(jar_router.router, prefix="/api", tags=["jar"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn monojar.api.app:app
app = create_app()
