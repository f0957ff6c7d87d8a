"""
Health check endpoint.

Reports whether the application is up and whether it can
reach its database.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_tracker.logging_config import get_logger
from finance_tracker.models.base import get_db

router = APIRouter(tags=["Health"])

logger = get_logger(__name__)


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Return application health status including database connectivity.

    A failing probe does not fail the request: the endpoint
    reports "degraded" so monitoring can tell the app is up but
    the store is not.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("Database health probe failed", error=str(e))
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "finance-tracker",
        "database": db_status,
    }
