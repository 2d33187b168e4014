"""
CX Engine FastAPI Application
=============================

Stateless REST API over the feedback-analytics engine.

Endpoints:
    GET  /api/health            - Liveness and version
    POST /api/analysis/...      - See analysis_routes

Usage:
    uvicorn cxengine.api.main:app --port 8000
"""

from dotenv import load_dotenv
load_dotenv()

import logging
import os
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import get_settings
from ..orchestrator.logging_config import setup_logging_from_settings
from .analysis_routes import router as analysis_router
from .models import HealthResponse

logger = logging.getLogger(__name__)

LOCAL_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


def cors_origins() -> List[str]:
    """Local dev origins plus the comma-separated CORS_ORIGINS."""
    extra = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",")]
    return LOCAL_ORIGINS + [o for o in extra if o]


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging_from_settings(settings)
    logger.info("CX Engine API %s up (%s)", __version__, settings.environment)
    yield
    logger.info("CX Engine API stopped")


app = FastAPI(
    title="CX Engine API",
    description="Offline sentiment, root-cause and NPS analytics for customer feedback",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(analysis_router)


@app.get("/api/health", response_model=HealthResponse)
async def health():
    """The engine has no backing services: serving requests means healthy."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=get_settings().environment,
    )
