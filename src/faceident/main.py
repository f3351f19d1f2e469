"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from faceident.config import Settings

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from faceident.api.routes import router
from faceident.config import get_settings
from faceident.matching.matcher import Matcher
from faceident.matching.verifier import Verifier
from faceident.ml.inference import MatchingPool

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def init_state(app: FastAPI, settings: Settings) -> None:
    """Attach settings and the matching components to the application state."""
    app.state.settings = settings
    app.state.matcher = Matcher.from_settings(settings)
    app.state.verifier = Verifier(app.state.matcher.scorer)
    app.state.matching_pool = MatchingPool(settings, app.state.matcher, app.state.verifier)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: initialize on startup, clean up on shutdown."""
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format=LOG_FORMAT,
    )

    logger.info(
        "Starting faceident (match_threshold=%s, hash_bits=%s, hamming_threshold=%s, max_concurrent=%s)",
        settings.match_threshold,
        settings.hash_bits,
        settings.hamming_threshold,
        settings.max_concurrent,
    )

    init_state(app, settings)

    logger.info("faceident ready")
    yield

    logger.info("Shutting down faceident")
    app.state.matching_pool.shutdown()
    logger.info("faceident shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="faceident",
        description="Storage-agnostic face descriptor identification and verification",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(router)
    return application


app = create_app()


def run() -> None:
    """Serve the application with uvicorn using the configured host and port."""
    settings = get_settings()
    uvicorn.run("faceident.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
