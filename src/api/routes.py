"""Recipe API routes: generation and health checks."""

import platform
import sys
import time
from typing import Optional

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from src.api.responses import (
    generation_error_response,
    internal_error_response,
    iso_timestamp,
    success_response,
)
from src.models.errors import ErrorCode, GenerationError
from src.models.models import HealthResponse, ImageAttachment
from src.pipeline.normalize_input import build_generation_request
from src.utils.logger import logger

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


def _uptime(request: Request) -> int:
    return int(time.monotonic() - request.app.state.started_at)


def _max_rss() -> Optional[int]:
    """Peak resident set size, or None where the resource module is missing (Windows)."""
    if sys.platform == "win32":
        return None
    import resource

    return resource.getrusage(resource.RUSAGE_SELF).ru_maxrss


async def _read_uploads(uploads: Optional[list[UploadFile]]) -> list[ImageAttachment]:
    images = []
    for upload in uploads or []:
        data = await upload.read()
        images.append(ImageAttachment(data=data, mime_type=upload.content_type or "", filename=upload.filename))
    return images


@router.post("/generate")
async def generate_recipe(
    request: Request,
    ingredients: Optional[str] = Form(None, description="JSON array of ingredient names, or comma-separated text"),
    preferences: Optional[str] = Form(None, description="Optional style or taste preference"),
    images: Optional[list[UploadFile]] = File(None, description="Up to 10 ingredient photos"),
) -> JSONResponse:
    """Generate one recipe from ingredients, optional preferences and photos."""
    request_id = request.state.request_id
    started_at = request.state.started_at
    extra = {"request_id": request_id}

    try:
        generation_request = build_generation_request(ingredients, preferences, await _read_uploads(images))

        generator = request.app.state.generator
        if generator is None:
            logger.error("Recipe generation requested but GEMINI_API_KEY is not configured", extra=extra)
            raise GenerationError(ErrorCode.INTERNAL_SERVER_ERROR, "AI service is not configured")

        result = await generator.generate(generation_request, request_id=request_id)
    except GenerationError as e:
        logger.warning(f"Recipe generation failed: {e.code.value}: {e.message}", extra={**extra, "error_code": e.code.value})
        return generation_error_response(e, request_id, started_at)
    except Exception as e:
        logger.exception(f"Unexpected error during recipe generation: {e}", extra=extra)
        return internal_error_response(request_id, started_at)

    return success_response(result, request_id, started_at)


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    settings = request.app.state.settings
    return HealthResponse(
        status="ok",
        timestamp=iso_timestamp(),
        service=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
        uptime=_uptime(request),
    )


@router.get("/health/detailed")
async def health_detailed(request: Request) -> dict:
    """Health of each pipeline component plus runtime details."""
    ai_configured = request.app.state.generator is not None
    return {
        "status": "ok" if ai_configured else "degraded",
        "timestamp": iso_timestamp(),
        "services": {
            "api": {"status": "ok", "uptime": _uptime(request)},
            "ai": {"status": "ok" if ai_configured else "not_configured", "configured": ai_configured},
            "enhancer": {"status": "ok"},
        },
        "environment": {
            "pythonVersion": platform.python_version(),
            "platform": sys.platform,
            "memory": {
                "maxRss": _max_rss(),
                "allocatedBlocks": sys.getallocatedblocks(),
            },
        },
    }
