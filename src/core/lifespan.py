from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from core.config import settings
from model.database import create_db_and_tables
from provider.gemini import GeminiImageProvider
from provider.sora import OpenAIVideoProvider
from storage.local import LocalObjectStorage
from utility.logger import setup_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    # === 시작 ===
    setup_logger(settings.LOG_LEVEL)
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION}")

    create_db_and_tables()
    logger.info(f"Database ready ({settings.DATABASE_URL})")

    app.state.settings = settings
    app.state.storage = LocalObjectStorage(settings)
    app.state.image_provider = GeminiImageProvider(settings)
    app.state.video_provider = OpenAIVideoProvider(settings)
    logger.info(f"Storage ready ({settings.STORAGE_DIR} → {settings.PUBLIC_BASE_URL}/storage)")

    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY not set, image generation will fail")
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY not set, video generation will fail")

    yield

    # === 종료 ===
    app.state.image_provider.session.close()
    app.state.video_provider.session.close()
    logger.info("Shutting down")
