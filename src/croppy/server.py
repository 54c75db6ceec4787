"""
FastAPI front end

Serves derivative paths through the request handler:
- catch-all GET route with optional ``token`` query parameter
- redirects for remote crop stores, file/byte responses for local ones
- cache statistics and health endpoints
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse, Response

from croppy.core import Croppy
from croppy.errors.exceptions import CroppyError
from croppy.types import Delivery, Outcome

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=31536000"


def create_router(croppy: Croppy) -> APIRouter:
    router = APIRouter(tags=["Croppy"])

    @router.get("/_croppy/health")
    def health_check() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(content={"status": "healthy", "service": "croppy"})

    @router.get("/_croppy/stats")
    def get_cache_stats() -> JSONResponse:
        """Derivative cache counters."""
        stats = croppy.stats()
        return JSONResponse(
            content={"success": True, "stats": {**stats.model_dump(), "hit_rate": stats.hit_rate}}
        )

    @router.get("/{path:path}")
    def serve_derivative(
        path: str,
        token: str | None = Query(default=None, description="Signing token"),
    ) -> Response:
        """Serve (generating on first request) the derivative at ``path``.

        Plain ``def``: Starlette runs it in the threadpool.
        """
        delivery = croppy.handle(path, token)
        return to_response(delivery)

    return router


def to_response(delivery: Delivery) -> Response:
    """Map a handler delivery onto a Starlette response."""
    if delivery.outcome == Outcome.PASS_THROUGH:
        return Response(status_code=delivery.status)

    if delivery.outcome == Outcome.REDIRECT:
        return RedirectResponse(url=delivery.location or "/", status_code=delivery.status)

    headers = {"Cache-Control": CACHE_CONTROL}
    if delivery.file_path is not None:
        return FileResponse(
            delivery.file_path,
            status_code=delivery.status,
            media_type=delivery.content_type,
            headers=headers,
        )
    return Response(
        content=delivery.body,
        status_code=delivery.status,
        media_type=delivery.content_type,
        headers=headers,
    )


def create_app(croppy: Croppy | None = None) -> FastAPI:
    croppy = croppy or Croppy()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        croppy.close()

    app = FastAPI(title="croppy", lifespan=lifespan)

    @app.exception_handler(CroppyError)
    async def croppy_error_handler(request: Request, exc: CroppyError) -> Response:
        if exc.http_status >= 500:
            logger.error("[Croppy] %s failed: %s", request.url.path, exc)
        else:
            logger.info("[Croppy] %s -> %d: %s", request.url.path, exc.http_status, exc)
        # Bodies stay generic so a bad token looks like a missing file
        return Response(status_code=exc.http_status)

    app.state.croppy = croppy
    app.include_router(create_router(croppy))
    return app
