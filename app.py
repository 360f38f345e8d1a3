"""Recipe Generation Service - HTTP entry point.

Single entry point for the recipe generation API:
- Builds the FastAPI app (routes, CORS, request ids, error envelopes)
- Creates the Gemini-backed generator when GEMINI_API_KEY is set
- Serves with uvicorn on HOST:PORT

Run with: python app.py
"""

import uvicorn

from src.api.app import create_app
from src.utils.config import config
from src.utils.logger import logger

app = create_app()


if __name__ == "__main__":
    logger.info(f"Starting {config.SERVICE_NAME} v{config.SERVICE_VERSION} on port {config.PORT}")
    logger.info(f"Model: {config.GEMINI_MODEL} (configured: {config.ai_configured})")
    logger.info(f"API docs available at: http://localhost:{config.PORT}/docs")
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_config=None)
