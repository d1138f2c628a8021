"""Shared helpers for API routers."""

import logging
from datetime import datetime, timezone

from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {"error": "Internal server error"}


def internal_error() -> JSONResponse:
    """Generic 500 response; details stay in the server log."""
    return JSONResponse(status_code=500, content=dict(INTERNAL_ERROR_BODY))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
