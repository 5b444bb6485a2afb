"""Metricboard — FastAPI Application Entry Point.

Marketing-analytics dashboard API: forwards requests to the analytics
backend and reshapes monthly metrics into chart-ready series.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from metricboard.api.company_routes import router as company_router
from metricboard.api.series_routes import router as series_router
from metricboard.config import settings
from metricboard.core.logging import get_logger

logger = get_logger("main")

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info(f"Metricboard starting, analytics backend at {settings.analytics_api_url}")
    yield
    logger.info("Metricboard shut down")


app = FastAPI(
    title="Metricboard",
    description="Marketing analytics dashboard API — backend passthrough and chart-ready monthly series.",
    version=VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(company_router)
app.include_router(series_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "metricboard",
        "version": VERSION,
    }
