"""Recipe generation pipeline.

RecipeGenerator ties the stages together for one normalized request:

    prepare images → build prompt → [model call → parse → validate] (retried)
        → quality check → enhance

The bracketed part is one attempt; a malformed answer fails the attempt the
same way a transport error does. Errors surface as GenerationError and no
partial recipe is ever returned.
"""

import time
from typing import Optional

from src.clients.gemini import GeminiClient, ModelClient
from src.models.models import GenerationRequest, GenerationResult, Recipe
from src.pipeline.enhancer import enhance_recipe
from src.pipeline.parser import parse_model_response
from src.pipeline.quality import build_quality_info
from src.pipeline.retry import SleepFunc, invoke_with_retry
from src.pipeline.validator import validate_recipe
from src.prompts.prompts import build_recipe_prompt
from src.utils.config import Config, config
from src.utils.images import prepare_forwarded_images
from src.utils.logger import logger


class RecipeGenerator:
    """Generates one enhanced recipe per request.

    Args:
        model_client: Object with `async generate(prompt, images) -> str`.
        max_attempts: Attempts per request, including the first.
        base_delay: Backoff base in seconds (1 → waits 1s, then 2s).
        sleep: Awaitable sleep between attempts (tests pass a no-op).
    """

    def __init__(
        self,
        model_client: ModelClient,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        sleep: Optional[SleepFunc] = None,
    ) -> None:
        self.model_client = model_client
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.sleep = sleep

    @classmethod
    def from_config(cls, settings: Config = config) -> "RecipeGenerator":
        """Build a generator with a GeminiClient from settings.

        Raises:
            ValueError: If GEMINI_API_KEY is not set.
        """
        client = GeminiClient(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            temperature=settings.TEMPERATURE,
            max_output_tokens=settings.MAX_OUTPUT_TOKENS,
        )
        return cls(client, max_attempts=settings.MAX_RETRIES, base_delay=settings.RETRY_BASE_DELAY)

    async def generate(self, request: GenerationRequest, request_id: Optional[str] = None) -> GenerationResult:
        """Generate, validate and enhance a recipe for `request`.

        Raises:
            GenerationError: From the final failed attempt.
        """
        extra = {"request_id": request_id} if request_id else {}
        start = time.perf_counter()
        logger.info(
            f"Generating recipe: {len(request.ingredients)} ingredient(s), {len(request.images)} image(s)",
            extra=extra,
        )

        images = prepare_forwarded_images(request.images)
        prompt = build_recipe_prompt(request.ingredients, request.preferences)

        async def attempt() -> Recipe:
            text = await self.model_client.generate(prompt, images)
            return validate_recipe(parse_model_response(text))

        raw = await invoke_with_retry(
            attempt,
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            sleep=self.sleep,
            request_id=request_id,
        )

        enhanced = enhance_recipe(raw)
        quality_info = build_quality_info(raw, enhanced)
        if quality_info.has_issues:
            logger.info(f"Recipe quality issues: {quality_info.issues}", extra=extra)

        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            f"Recipe generated: {enhanced.title!r} in {duration_ms}ms",
            extra={**extra, "duration_ms": duration_ms},
        )
        return GenerationResult(recipe=enhanced, quality_info=quality_info)
