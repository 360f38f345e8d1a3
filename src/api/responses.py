"""JSON envelopes for the HTTP API.

Success: {"success": true, "data": Recipe, "meta": {...}, "qualityInfo": {...}}
Failure: {"success": false, "error": {"code", "message"}, "meta": {...}}
"""

import time
from datetime import datetime, timezone
from typing import Optional

from fastapi.responses import JSONResponse

from src.models.errors import ErrorCode, GenerationError
from src.models.models import ErrorInfo, ErrorResponse, GenerationResult, RecipeSuccessResponse, ResponseMeta

REQUEST_ID_HEADER = "X-Request-ID"


def iso_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def build_meta(request_id: str, started_at: Optional[float] = None) -> ResponseMeta:
    """Response metadata; processing time is measured from `started_at` (perf_counter)."""
    elapsed = time.perf_counter() - started_at if started_at is not None else 0.0
    return ResponseMeta(request_id=request_id, processing_time=int(elapsed * 1000), timestamp=iso_timestamp())


def success_response(result: GenerationResult, request_id: str, started_at: Optional[float] = None) -> JSONResponse:
    body = RecipeSuccessResponse(
        data=result.recipe.to_wire(),
        meta=build_meta(request_id, started_at),
        quality_info=result.quality_info,
    )
    return JSONResponse(status_code=200, content=body.model_dump(by_alias=True))


def error_response(
    code: str,
    message: str,
    status_code: int,
    request_id: Optional[str] = None,
    started_at: Optional[float] = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorInfo(code=code, message=message),
        meta=build_meta(request_id, started_at) if request_id else None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True, exclude_none=True))


def generation_error_response(
    error: GenerationError, request_id: Optional[str] = None, started_at: Optional[float] = None
) -> JSONResponse:
    return error_response(error.code.value, error.message, error.status_code, request_id, started_at)


def internal_error_response(request_id: Optional[str] = None, started_at: Optional[float] = None) -> JSONResponse:
    return error_response(
        ErrorCode.INTERNAL_SERVER_ERROR.value,
        "An unexpected error occurred",
        500,
        request_id,
        started_at,
    )
