"""
Operational endpoints: liveness, database readiness and Prometheus metrics
"""
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from carstatus import __version__
from carstatus.core.config import get_settings
from carstatus.core.database import get_db
from carstatus.core.logging_config import LoggingConfig
from carstatus.core.metrics import get_metrics, get_metrics_content_type
from carstatus.utils.datetime_utils import utc_now

logger = LoggingConfig.get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Liveness; never touches the database"""
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": get_settings().app_name,
    }


@router.get("/health/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """
    Readiness: runs ``SELECT 1`` against the TeslaMate database

    Always answers 200; a failed probe shows up as ``"status": "unhealthy"``
    with the driver error name under ``components.database``.
    """
    settings = get_settings()
    try:
        db.execute(text("SELECT 1"))
        database = {"status": "healthy", "message": "Database connection successful"}
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        database = {
            "status": "unhealthy",
            "message": f"Database connection failed: {e}",
            "error": type(e).__name__,
        }

    return {
        "status": database["status"],
        "timestamp": utc_now().isoformat(),
        "service": settings.app_name,
        "version": __version__,
        "environment": settings.app_env,
        "timezone": settings.timezone,
        "components": {"database": database},
    }


@router.get("/metrics")
async def metrics():
    """Prometheus text exposition"""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())
