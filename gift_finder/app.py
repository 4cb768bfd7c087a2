from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import GiftFinderConfig, load_config
from .recommendations.models import GiftCriteria, GiftFinderResponse
from .recommendations.service import GiftFinder

logger = logging.getLogger(__name__)

GIFT_FINDER_PATH = "/api/gift-finder"

_config: GiftFinderConfig = load_config()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": _config.storefront.origin,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

app = FastAPI(title="Gift Finder API", version="1.0.0")


@app.middleware("http")
async def storefront_cors(request: Request, call_next):
    # Every response, preflight included, is pinned to the storefront origin.
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405 and request.url.path == GIFT_FINDER_PATH:
        return JSONResponse(status_code=405, content={"error": "POST only"})
    return await http_exception_handler(request, exc)


@lru_cache(maxsize=1)
def get_gift_finder() -> GiftFinder:
    return GiftFinder(_config)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post(GIFT_FINDER_PATH, response_model=GiftFinderResponse)
def gift_finder(
    body: GiftCriteria | None = None,
    finder: GiftFinder = Depends(get_gift_finder),
):
    try:
        return finder.recommend(body or GiftCriteria())
    except Exception:
        logger.exception("Gift finder request failed")
        return JSONResponse(status_code=500, content={"error": "AI gift finder failed"})


@app.options(GIFT_FINDER_PATH)
def gift_finder_preflight() -> Response:
    return Response(status_code=200)
