from fastapi import APIRouter
from sqlalchemy import text

from celltech.database import engine
from celltech.utils.cache import redis_client

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the database and Redis are reachable."
)
def readiness_check():
    """
    Readiness check for all dependencies.
    
    The database is required; Redis only backs the product cache, so
    the service reports ``degraded`` rather than ``not_ready`` without it.
    """
    checks = {
        "database": False,
        "redis": False
    }
    
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        checks["database_error"] = str(e)
    
    try:
        redis_client.ping()
        checks["redis"] = True
    except Exception as e:
        checks["redis_error"] = str(e)
    
    if not checks["database"]:
        overall = "not_ready"
    elif not checks["redis"]:
        overall = "degraded"
    else:
        overall = "ready"
    
    return {
        "status": overall,
        "checks": checks
    }
