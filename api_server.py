from __future__ import annotations  # FastAPI application exposing interview sessions

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from config import settings


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Interview Session API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    logger.info("Interview API ready model=%s base_url=%s", settings.LLM_MODEL, settings.LLM_BASE_URL)
    return app


app = create_app()
