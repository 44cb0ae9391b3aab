"""
Health and readiness endpoints
"""

import time
from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from app.core.config import config
from app.core.errors import ErrorResponse
from app.core.logger import logger
from app.db.mongodb import get_database

router = APIRouter()


@router.get("/health")
def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": config.service_name,
        "timestamp": datetime.now().isoformat(),
        "version": config.api_version,
    }


@router.get("/health/ready")
async def readiness_check():
    """Readiness probe - MongoDB must answer a ping"""
    check_start = time.time()
    try:
        database = await get_database()
        await database.command("ping")
    except (PyMongoError, ErrorResponse) as e:
        logger.error(
            f"Database health check failed: {e}",
            metadata={"event": "health_check_database_failed", "database": config.mongodb_database}
        )
        return JSONResponse(
            status_code=503,
            content={
                "status": "not ready",
                "service": config.service_name,
                "timestamp": datetime.now().isoformat(),
                "checks": [{"name": "database", "status": "unhealthy", "error": str(e)}],
            },
        )

    response_time_ms = (time.time() - check_start) * 1000
    return {
        "status": "ready",
        "service": config.service_name,
        "timestamp": datetime.now().isoformat(),
        "checks": [{
            "name": "database",
            "status": "healthy",
            "response_time_ms": round(response_time_ms, 2),
        }],
    }
