"""Gemini model client for recipe generation.

Wraps the synchronous google-genai client behind an async `generate()` call
(asyncio.to_thread) and translates SDK and transport failures into
GenerationError codes. One attempt per call; retries are the generator's job.
"""

import asyncio
from typing import Optional, Protocol

from google import genai
from google.genai import types

from src.models.errors import ErrorCode, ErrorReason, GenerationError
from src.models.models import ImageAttachment
from src.prompts.prompts import IMAGE_INSTRUCTION
from src.utils.logger import logger

RATE_LIMIT_STATUS = 429
TIMEOUT_STATUSES = (408, 504)
RATE_LIMIT_MARKERS = ("rate limit", "quota", "resource_exhausted")
TIMEOUT_MARKERS = ("timeout", "timed out", "deadline")


class ModelClient(Protocol):
    """Anything that turns a prompt plus images into raw model text."""

    async def generate(self, prompt: str, images: list[ImageAttachment]) -> str: ...


def build_prompt_parts(prompt: str, images: list[ImageAttachment]) -> list:
    """Build the `contents` list: prompt text, inline images, then the image instruction."""
    if not images:
        return [prompt]
    parts: list = [prompt]
    parts.extend(types.Part.from_bytes(data=image.data, mime_type=image.mime_type) for image in images)
    parts.append(IMAGE_INSTRUCTION)
    return parts


def classify_error(exc: Exception) -> GenerationError:
    """Map an SDK or transport exception onto a GenerationError.

    google-genai APIError carries the HTTP status in `.code`; other failures
    (httpx timeouts, connection errors) are classified by type name and message.
    """
    if isinstance(exc, GenerationError):
        return exc

    status = getattr(exc, "code", None)
    text = f"{type(exc).__name__} {exc}".lower()

    if status == RATE_LIMIT_STATUS or any(marker in text for marker in RATE_LIMIT_MARKERS):
        return GenerationError(
            ErrorCode.RATE_LIMIT_EXCEEDED,
            "AI service rate limit exceeded, please try again later",
            reason=ErrorReason.AI_API_ERROR,
        )
    if status in TIMEOUT_STATUSES or isinstance(exc, TimeoutError) or any(marker in text for marker in TIMEOUT_MARKERS):
        return GenerationError(
            ErrorCode.REQUEST_TIMEOUT,
            "AI service request timed out",
            reason=ErrorReason.AI_API_ERROR,
        )
    return GenerationError(
        ErrorCode.AI_SERVICE_UNAVAILABLE,
        f"AI service unavailable: {exc}",
        reason=ErrorReason.AI_API_ERROR,
    )


class GeminiClient:
    """Async recipe generation client backed by google-genai.

    Args:
        api_key: Gemini API key (required).
        model: Model name, e.g. "gemini-2.5-flash".
        temperature: Sampling temperature.
        max_output_tokens: Output token cap.
        client: Pre-built genai.Client (tests inject a mock here).
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float = 0.7,
        max_output_tokens: int = 2048,
        client: Optional[genai.Client] = None,
    ) -> None:
        if not api_key and client is None:
            raise ValueError("GEMINI_API_KEY is required to create a GeminiClient")
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._client = client or genai.Client(api_key=api_key)

    def _generation_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
            response_mime_type="application/json",
        )

    async def generate(self, prompt: str, images: list[ImageAttachment]) -> str:
        """Run one generation call and return the raw response text.

        Raises:
            GenerationError: Classified API failure, or AI_RESPONSE_ERROR when
                the model returns no text.
        """
        try:
            response = await asyncio.to_thread(
                self._client.models.generate_content,
                model=self.model,
                contents=build_prompt_parts(prompt, images),
                config=self._generation_config(),
            )
        except Exception as e:
            error = classify_error(e)
            logger.warning(f"Gemini call failed ({error.code.value}): {e}")
            raise error from e

        text = getattr(response, "text", None)
        if not text or not text.strip():
            raise GenerationError(
                ErrorCode.AI_RESPONSE_ERROR,
                "AI service returned an empty response",
                reason=ErrorReason.PARSING_ERROR,
            )

        logger.debug(f"Gemini returned {len(text)} chars")
        return text
