"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from recruitment.core.config import settings
from recruitment.db.session import engine
from recruitment.errors import AppError, app_error_handler, internal_error_handler
from recruitment.routers import candidates, health, hrd, public_onboarding

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup, dispose the engine's pool on shutdown."""
    logger.info("Starting %s", settings.APP_NAME)
    yield
    logger.info("Shutting down %s", settings.APP_NAME)
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Candidate pipeline, token onboarding and HRD approval API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(Exception, internal_error_handler)

app.include_router(health.router, tags=["Health"])
app.include_router(candidates.router)
app.include_router(hrd.router)
app.include_router(public_onboarding.router)
