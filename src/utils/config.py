"""Configuration management for Recipe Generation Service.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _get_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Gemini API key: not required at import, generation fails without it
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Default: gemini-2.5-flash (fast, supports inline images)
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        # Server binding
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "3001"))
        # Comma-separated list of allowed CORS origins
        self.CORS_ORIGIN: str = os.getenv("CORS_ORIGIN", "http://localhost:3000")
        # Reported by the health endpoints
        self.SERVICE_NAME: str = os.getenv("SERVICE_NAME", "recipe-api")
        self.SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "0.1.0")

        # LLM Model Parameters
        # Temperature: 0.7 leaves room for creative recipes
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "2048"))

        # Retry Configuration
        # MAX_RETRIES: total attempts per request (not additional retries)
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
        # RETRY_BASE_DELAY: first delay in seconds, doubled after each failed attempt (1s, 2s, ...)
        self.RETRY_BASE_DELAY: float = float(os.getenv("RETRY_BASE_DELAY", "1"))

        # Request limits
        self.MAX_INGREDIENTS: int = int(os.getenv("MAX_INGREDIENTS", "50"))
        self.MAX_PREFERENCES_LENGTH: int = int(os.getenv("MAX_PREFERENCES_LENGTH", "200"))
        self.MAX_IMAGES: int = int(os.getenv("MAX_IMAGES", "10"))
        self.MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "5"))
        self.MAX_TOTAL_IMAGE_SIZE_MB: int = int(os.getenv("MAX_TOTAL_IMAGE_SIZE_MB", "20"))
        # Only the first N uploaded images are sent to the model
        self.MAX_FORWARDED_IMAGES: int = int(os.getenv("MAX_FORWARDED_IMAGES", "3"))

        # Image Compression: re-encode forwarded images above the threshold (in KB)
        self.COMPRESS_IMG: bool = _get_bool("COMPRESS_IMG", "true")
        self.COMPRESS_IMG_THRESHOLD_KB: int = int(os.getenv("COMPRESS_IMG_THRESHOLD_KB", "300"))

    @property
    def cors_origins(self) -> list[str]:
        """CORS_ORIGIN split into a list of origins."""
        return [origin.strip() for origin in self.CORS_ORIGIN.split(",") if origin.strip()]

    @property
    def ai_configured(self) -> bool:
        return bool(self.GEMINI_API_KEY)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If a value is outside its allowed range.
        """
        if not (0.0 <= self.TEMPERATURE <= 2.0):
            raise ValueError(f"TEMPERATURE must be between 0.0 and 2.0, got: {self.TEMPERATURE}")
        if self.MAX_OUTPUT_TOKENS < 256:
            raise ValueError(f"MAX_OUTPUT_TOKENS must be at least 256, got: {self.MAX_OUTPUT_TOKENS}")
        if self.MAX_RETRIES < 1:
            raise ValueError(f"MAX_RETRIES must be at least 1, got: {self.MAX_RETRIES}")
        if self.RETRY_BASE_DELAY < 0:
            raise ValueError(f"RETRY_BASE_DELAY must not be negative, got: {self.RETRY_BASE_DELAY}")
        if self.MAX_INGREDIENTS < 1:
            raise ValueError(f"MAX_INGREDIENTS must be at least 1, got: {self.MAX_INGREDIENTS}")
        if self.MAX_FORWARDED_IMAGES > self.MAX_IMAGES:
            raise ValueError(
                f"MAX_FORWARDED_IMAGES ({self.MAX_FORWARDED_IMAGES}) cannot exceed MAX_IMAGES ({self.MAX_IMAGES})"
            )
        if not (1 <= self.PORT <= 65535):
            raise ValueError(f"PORT must be between 1 and 65535, got: {self.PORT}")


# Create module-level config instance and validate immediately
config = Config()
config.validate()
