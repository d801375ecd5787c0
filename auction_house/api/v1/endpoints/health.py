"""
Health checks - for load balancers, Kubernetes, and monitoring.
Challenge: Fast liveness; dependency check for readiness.
"""

from fastapi import APIRouter, Request
from sqlalchemy import text

from auction_house.config import get_settings
from auction_house.db.session import DbSession

router = APIRouter()
settings = get_settings()


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready(session: DbSession, request: Request):
    """Readiness: the store answers and the sweeper (if enabled) is running."""
    await session.execute(text("SELECT 1"))
    sweeper = getattr(request.app.state, "sweeper", None)
    return {"status": "ready", "sweeper": "running" if sweeper and sweeper.running else "off"}
