"""Error taxonomy for recipe generation.

Every pipeline stage raises GenerationError; the HTTP layer maps the code to a
status and the JSON error envelope. The optional ``reason`` keeps the finer
distinction between unparseable output, schema violations and upstream API
failures for logging.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Public error codes returned in the error envelope."""

    INVALID_REQUEST = "INVALID_REQUEST"
    AI_SERVICE_UNAVAILABLE = "AI_SERVICE_UNAVAILABLE"
    REQUEST_TIMEOUT = "REQUEST_TIMEOUT"
    AI_RESPONSE_ERROR = "AI_RESPONSE_ERROR"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ErrorReason(str, Enum):
    """Internal failure kinds, logged but not part of the public contract."""

    PARSING_ERROR = "PARSING_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AI_API_ERROR = "AI_API_ERROR"


ERROR_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.RATE_LIMIT_EXCEEDED: 429,
    ErrorCode.AI_SERVICE_UNAVAILABLE: 502,
    ErrorCode.REQUEST_TIMEOUT: 504,
    ErrorCode.AI_RESPONSE_ERROR: 500,
    ErrorCode.INTERNAL_SERVER_ERROR: 500,
}


class GenerationError(Exception):
    """Typed failure of one recipe generation stage."""

    def __init__(self, code: ErrorCode, message: str, reason: Optional[ErrorReason] = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.reason = reason

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES[self.code]

    def __repr__(self) -> str:
        reason = f", reason={self.reason.value}" if self.reason else ""
        return f"GenerationError(code={self.code.value}{reason}, message={self.message!r})"


def invalid_request(message: str) -> GenerationError:
    return GenerationError(ErrorCode.INVALID_REQUEST, message)
