"""ChefMate API - Conversational Recipe Generation Service.

Single entry point for the HTTP service:
- Builds the key-value store, profile/chat stores, Gemini generation service
  and conversation orchestrator via chefmate.api.app.create_app
- Serves the REST API with uvicorn

Run with: python app.py
"""

import uvicorn

from chefmate.api.app import create_app
from chefmate.utils.config import config
from chefmate.utils.logger import logger

app = create_app(config)


if __name__ == "__main__":
    logger.info(f"Starting ChefMate API on port {config.PORT}")
    logger.info(f"Store backend: {config.STORE_BACKEND}, model: {config.GEMINI_MODEL}")
    logger.info(f"API docs available at: http://localhost:{config.PORT}/docs")
    uvicorn.run(app, host="0.0.0.0", port=config.PORT, log_level="warning")
