"""
Health Check Endpoints

- /health/live  - Basic liveness (app is running)
- /health/ready - Readiness check (database reachable, config sane)
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from datetime import datetime
from typing import Dict, Any
import time

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.database import get_session_local
from app.core.logging_config import logger


router = APIRouter(prefix="/health", tags=["Health Checks"])


async def check_database() -> Dict[str, Any]:
    """Check database connectivity and that the schema exists"""
    start = time.time()
    try:
        session_factory = get_session_local()
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
            await session.execute(text("SELECT COUNT(*) FROM users"))

        return {
            "status": "healthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
            "message": "Database connection successful"
        }
    except SQLAlchemyError as e:
        logger.error(f"[HealthCheck] Database check failed: {e}")
        return {
            "status": "unhealthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
            "error": str(e) if settings.DEBUG else "unavailable",
            "message": "Database connection failed"
        }


def check_critical_env_vars() -> Dict[str, Any]:
    """Secrets must not be left at placeholder values"""
    missing = [
        name for name, value in {
            "SECRET_KEY": settings.SECRET_KEY,
            "JWT_SECRET_KEY": settings.JWT_SECRET_KEY,
        }.items()
        if not value or value in ["CHANGE_ME", "your-secret-key"]
    ]
    if missing:
        return {
            "status": "unhealthy",
            "missing_critical": missing,
            "message": f"Missing critical env vars: {', '.join(missing)}"
        }
    return {"status": "healthy", "missing_critical": []}


@router.get("/live")
async def liveness():
    """Liveness probe"""
    return {
        "status": "alive",
        "service": settings.APP_NAME,
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get("/ready")
async def readiness():
    """Readiness probe; 503 until the database answers"""
    checks = {
        "database": await check_database(),
        "config": check_critical_env_vars(),
    }
    healthy = all(check["status"] == "healthy" for check in checks.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if healthy else "not_ready",
            "checks": checks,
            "timestamp": datetime.utcnow().isoformat()
        }
    )
