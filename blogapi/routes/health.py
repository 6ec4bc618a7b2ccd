"""Health check endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from blogapi.database import get_db
from blogapi.logging_config import get_logger

router = APIRouter(prefix="/health", tags=["health"])

logger = get_logger("blogapi.health")


@router.get("")
def health_check(db=Depends(get_db)):
    """Liveness plus a database round trip, for load balancers and monitoring."""
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.warning("Health check database probe failed: %s", e)
        database = "unavailable"
    return {"status": "ok", "database": database}
