"""Liveness probe."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

router = APIRouter(prefix="/api", tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health")
def health(request: Request) -> dict[str, str]:
    """Report ``ok`` when the job store answers a trivial query."""
    config = request.app.state.config  # type: ignore[attr-defined]
    try:
        with config.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("health.database_unavailable", extra={"error": str(exc)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": "error", "failure_reason": "database_unavailable"},
        ) from exc
    return {"status": "ok"}
