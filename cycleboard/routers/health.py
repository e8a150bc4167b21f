"""Health check endpoint."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from cycleboard.dependencies import AppSettings, Dashboard

router = APIRouter(tags=["system"])
logger = logging.getLogger("cycleboard.health")


@router.get("/health")
async def health_check(settings: AppSettings, view: Dashboard) -> dict:
    """Liveness probe. Returns 200 if the process is up.

    Reports "degraded" while the last dashboard refresh has failed.
    """
    return {
        "status": "degraded" if view.error else "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "dashboard": {
            "mounted": view.mounted,
            "loading": view.loading,
            "error": view.error,
            "rows": len(view.table.state.rows),
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
