"""
Health and readiness checks
"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jurispanel.core.config import settings
from jurispanel.core.logger import logger
from jurispanel.db.database import get_db
from jurispanel.services.settings_service import SettingsService

router = APIRouter()


def _check_database(db: Session) -> tuple[str, str]:
    """Returns (status, detail). Status is 'ok' or 'error'."""
    try:
        db.execute(text("SELECT 1"))
        return "ok", "Database reachable"
    except SQLAlchemyError as e:
        logger.error("Database check failed: %s", e)
        return "error", f"Database: {e}"


@router.get("")
def health_check(db: Session = Depends(get_db)):
    """
    Liveness plus the database status and the active AI provider/model.
    The provider is not called.
    """
    db_status, db_detail = _check_database(db)
    ai = SettingsService(db).get() if db_status == "ok" else None
    return {
        "status": "healthy" if db_status == "ok" else "degraded",
        "version": settings.APP_VERSION,
        "database": {"status": db_status, "detail": db_detail},
        "ai": {
            "provider": ai.active_provider,
            "model": ai.active_config().model,
        } if ai else None,
    }
