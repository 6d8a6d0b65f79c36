"""Liveness and readiness endpoints."""

from fastapi import APIRouter

from fitcore.core.database import check_connection, get_database_url

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz():
    """Lightweight liveness check (no deps)."""
    return {"status": "ok"}


@router.get("/readyz")
def readyz():
    """Database connectivity when one is configured; in-memory mode is always ready."""
    if not get_database_url():
        return {"status": "ok", "storage": "memory"}
    connected = check_connection()
    return {"status": "ok" if connected else "degraded", "storage": "sql", "db_connected": connected}
