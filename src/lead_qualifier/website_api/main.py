"""FastAPI application factory for the lead scoring API."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from .middleware.cors import add_cors
from .routes.health import router as health_router
from .routes.leads import router as leads_router
from .routes.engagement import router as engagement_router
from .routes.scoring import router as scoring_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting Lead Qualifier API")
    yield
    logger.info("Lead Qualifier API shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Lead Qualifier API",
        description="Intake scoring and lead qualification backend",
        version="1.0.0",
        lifespan=lifespan,
    )

    add_cors(app)

    # Routes
    app.include_router(health_router)
    app.include_router(leads_router)
    app.include_router(engagement_router)
    app.include_router(scoring_router)

    return app
