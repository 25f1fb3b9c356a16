"""Health check endpoints"""

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, Any
from datetime import datetime, timezone
import logging
import time

from app.core.config import settings
from app.core.database import get_db_context
from app.core.websocket import manager

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/health")
async def health_check():
    """Basic health check"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

@router.get("/health/detailed")
async def detailed_health_check() -> Dict[str, Any]:
    """Detailed health check with component status"""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {}
    }

    # Check database
    start = time.time()
    try:
        async with get_db_context() as db:
            await db.execute(text("SELECT 1"))
        health_status["components"]["database"] = {
            "status": "healthy",
            "response_time_ms": round((time.time() - start) * 1000, 2)
        }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {str(e)}")
        health_status["status"] = "unhealthy"
        health_status["components"]["database"] = {"status": "unhealthy"}

    # Realtime rooms
    health_status["components"]["realtime"] = {
        "status": "healthy",
        "connections": len(manager.active_connections),
        "rooms": len(manager.rooms)
    }

    return health_status
