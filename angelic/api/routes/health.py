"""Liveness and readiness checks for the load balancer."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from angelic.db.base import ping_db
from angelic.db.redis import ping_redis

router = APIRouter()


@router.get("/health")
async def health_check():
    return {"status": "healthy", "service": "angelic-backend"}


@router.get("/ready")
async def readiness_check():
    """503 with per-dependency flags when the database or Redis is down."""
    checks = {"database": await ping_db(), "redis": await ping_redis()}
    all_healthy = all(checks.values())
    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={"status": "ready" if all_healthy else "degraded", "checks": checks},
    )
