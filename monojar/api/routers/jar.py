"""Jar parsing endpoints.

Routes
------
POST /api/parse-monobank    Body: {"url": "https://send.monobank.ua/jar/..."}
GET  /api/health            Liveness probe
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from monojar.scraper.errors import JarParseError
from monojar.scraper.models import is_valid_jar_url

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ParseRequest(BaseModel):
    url: Optional[str] = None


class JarResponse(BaseModel):
    title: Optional[str]
    collected: Optional[str]
    target: Optional[str]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/parse-monobank", response_model=JarResponse)
async def parse_monobank(request: Request, body: Optional[ParseRequest] = None) -> Any:
    """Scrape a jar page and return its title and amounts.

    Falls back to ``DEFAULT_JAR_URL`` when no URL (or no body at all) is
    supplied.  Pipeline failures are turned into 500 responses by the
    app-level handler.
    """
    state = request.app.state
    requested = body.url if body is not None else None
    jar_url = (requested or "").strip() or state.settings.default_jar_url

    if not is_valid_jar_url(jar_url):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid URL",
                "message": "Expected https://send.monobank.ua/jar/<id>",
            },
        )

    cached = state.cache.get(jar_url)
    if cached is not None:
        return cached.to_dict()

    try:
        data = await state.parser.parse(jar_url)
    except JarParseError:
        raise
    except Exception as exc:
        logger.exception("[API] Unclassified failure parsing %s", jar_url)
        raise JarParseError(str(exc), url=jar_url) from exc

    state.cache.put(jar_url, data)
    return data.to_dict()


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
