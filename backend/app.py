import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI

from backend.routes import router
from sanogen.llm import GeminiClient

load_dotenv(Path(__file__).parent.parent / ".env")


def create_app(generator=None) -> FastAPI:
    """Build the API app. `generator` replaces the Gemini client (used in tests)."""
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

    app = FastAPI(title="Sanogenic Lab")
    app.state.generator = generator or GeminiClient.from_env()
    app.include_router(router, prefix="/api")
    return app


# Default app instance for uvicorn
app = create_app()
