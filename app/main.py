from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import logging
import os

from app.api.http import health_router
from app.api.router import api_router
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="ManualHub",
    description="Командное написание и публикация мануалов",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Загруженные файлы отдаются по /uploads/<stored_filename>
os.makedirs(settings.upload_dir, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

app.include_router(health_router)
app.include_router(api_router, prefix="/api")

logger.info(f"ManualHub started in {settings.environment} mode")


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "ManualHub API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }
