"""FastAPI application factory for the recipe generation service.

create_app() wires:
- The recipe router (/api/recipes/...)
- CORS for the configured web origins
- X-Request-ID propagation (client-supplied or generated UUID4) and timing
- JSON error envelopes for 404, request validation and unhandled errors

The generator is injected so tests can run the full HTTP stack against a stub
model client. Without a GEMINI_API_KEY the app still starts (health checks
work) and generation requests answer INTERNAL_SERVER_ERROR.
"""

import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.responses import REQUEST_ID_HEADER, error_response, internal_error_response
from src.api.routes import router
from src.pipeline.generator import RecipeGenerator
from src.utils.config import Config, config
from src.utils.logger import logger


def _request_context(request: Request) -> tuple[Optional[str], Optional[float]]:
    return getattr(request.state, "request_id", None), getattr(request.state, "started_at", None)


def create_app(generator: Optional[RecipeGenerator] = None, settings: Config = config) -> FastAPI:
    """Build the FastAPI app.

    Args:
        generator: Pipeline to serve; built from settings when omitted.
        settings: Configuration (default: module-level config).

    Returns:
        FastAPI: Configured application.
    """
    if generator is None and settings.ai_configured:
        generator = RecipeGenerator.from_config(settings)
    if generator is None:
        logger.warning("GEMINI_API_KEY not set - recipe generation requests will fail until it is configured")

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
        description="Generate recipes from ingredients and photos with Gemini",
    )
    app.state.generator = generator
    app.state.settings = settings
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.started_at = time.perf_counter()
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        logger.debug(
            f"{request.method} {request.url.path} → {response.status_code}",
            extra={
                "request_id": request.state.request_id,
                "duration_ms": int((time.perf_counter() - request.state.started_at) * 1000),
            },
        )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        request_id, started_at = _request_context(request)
        if exc.status_code == 404:
            return error_response("NOT_FOUND", f"Route not found: {request.url.path}", 404, request_id, started_at)
        return error_response("HTTP_ERROR", str(exc.detail), exc.status_code, request_id, started_at)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        request_id, started_at = _request_context(request)
        return error_response("INVALID_REQUEST", "Invalid request", 400, request_id, started_at)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        request_id, started_at = _request_context(request)
        logger.exception(f"Unhandled error: {exc}", extra={"request_id": request_id} if request_id else {})
        return internal_error_response(request_id, started_at)

    app.include_router(router)

    @app.get("/")
    async def root():
        """Service info and endpoint list."""
        return {
            "name": settings.SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "endpoints": {
                "generate": "POST /api/recipes/generate",
                "health": "GET /api/recipes/health",
                "healthDetailed": "GET /api/recipes/health/detailed",
                "docs": "GET /docs",
            },
        }

    return app
