"""Liveness and health endpoints"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dependencies import get_db
from app.errors.exceptions import InternalServerException
from app.errors.response_codes import success_response
from app.utils.timeutils import utcnow

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
def api_status():
    return success_response(data={
        "status": "running",
        "name": settings.PROJECT_NAME,
        "version": settings.PROJECT_VERSION,
        "environment": settings.ENVIRONMENT,
        "timestamp": utcnow(),
    })


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Checks that the database answers a trivial query"""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {str(e)}")
        raise InternalServerException(detail="Database unavailable")
    return success_response(data={"status": "healthy", "database": "ok", "timestamp": utcnow()})
