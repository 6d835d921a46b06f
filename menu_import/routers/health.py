"""
Health check router with database connectivity verification.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from menu_import.db.session import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic health check - always returns OK."""
    return {"status": "ok"}


@router.get("/api/health")
def api_health_check(db: Session = Depends(get_db)):
    """
    Health check verifying database connectivity.

    Returns 200 if the database answers, 503 otherwise.
    """
    health_status = {
        "status": "ok",
        "services": {}
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["services"]["database"] = {"status": "ok"}
    except Exception as e:
        health_status["services"]["database"] = {"status": "error", "message": str(e)}
        health_status["status"] = "unhealthy"
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=health_status
        )

    return health_status
