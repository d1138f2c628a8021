"""FastAPI application serving pipeline analytics."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings
from deal_insights.action.dependencies import internal_error
from deal_insights.action.routers.deals import router as deals_router
from deal_insights.action.routers.stats import router as stats_router
from deal_insights.db.connection import engine
from deal_insights.db.models import Base

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


async def _ensure_tables():
    """Create the deals table if it does not exist yet."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")
    except Exception:
        logger.exception("Failed to ensure database schema")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    await _ensure_tables()
    yield
    await engine.dispose()


app = FastAPI(title="Deal Insights API", version=APP_VERSION, lifespan=_lifespan)

app.include_router(stats_router)
app.include_router(deals_router)


@app.exception_handler(Exception)
async def _global_error_handler(request: Request, exc: Exception):
    """Catch-all: every unhandled error becomes the generic JSON 500."""
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return internal_error()


# CORS: lock down in production via CORS_ORIGINS (comma-separated).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": APP_VERSION}
