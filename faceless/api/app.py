"""
faceless/api/app.py
FastAPI application factory. Mounts middleware, static audio, and all routers.
This is the only place that wires layers together.
"""
import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware

from faceless.api.routes import fake_text, renders, voice
from faceless.core.config import AUDIO_OUTPUT_DIR, get_allow_origins
from faceless.store.db import init_db

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def create_app() -> FastAPI:
    app = FastAPI(
        title="Faceless Video API",
        version=VERSION,
        description="Fake text-message videos: chat timeline layout, TTS and template rendering.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_allow_origins(),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=86400,
    )

    # Synthesized dialogue audio, fetched by the render service
    AUDIO_OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    app.mount("/audio", StaticFiles(directory=str(AUDIO_OUTPUT_DIR)), name="audio")

    try:
        init_db()
    except Exception as exc:
        logger.warning(f"Could not initialize renders DB: {exc}")

    # Routers
    app.include_router(fake_text.router, tags=["Fake Text"])
    app.include_router(renders.router, tags=["Renders"])
    app.include_router(voice.router, tags=["Voice"])

    @app.get("/health")
    def health():
        return {"status": "ok", "version": VERSION}

    return app
