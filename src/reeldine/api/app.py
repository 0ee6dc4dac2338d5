"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from reeldine.api.ai import router as ai_router
from reeldine.api.comments import router as comments_router
from reeldine.api.foods import router as foods_router
from reeldine.api.notifications import router as notifications_router
from reeldine.api.search import router as search_router
from reeldine.api.social import router as social_router
from reeldine.app_logging import configure_logging
from reeldine.containers import AppContainer
from reeldine.errors import ReelDineError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="ReelDine API", lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ReelDineError)
    async def handle_reeldine_error(
        request: Request, exc: ReelDineError
    ) -> JSONResponse:
        if exc.status_code >= 500:  # noqa: PLR2004
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": _validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error"},
        )

    app.include_router(search_router)
    app.include_router(social_router)
    app.include_router(notifications_router)
    app.include_router(foods_router)
    app.include_router(comments_router)
    app.include_router(ai_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _validation_message(exc: RequestValidationError) -> str:
    """Render the first validation error as ``field: reason``."""
    errors = exc.errors()
    if not errors:
        return "Validation failed"
    first = errors[0]
    location = ".".join(
        str(part)
        for part in first.get("loc", ())
        if part not in {"body", "query", "path"}
    )
    reason = str(first.get("msg", "invalid value"))
    return f"{location}: {reason}" if location else reason
