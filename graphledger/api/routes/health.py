"""Health & Readiness: process liveness and database reachability.

Invariants:
    - GET /health/ answers 200 whenever the process can serve requests
    - GET /health/ready answers 503 until the session manager exists and SELECT 1 succeeds
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

import graphledger.infrastructure.database as db_module

router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "graphledger-api"


@router.get("/")
async def liveness():
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/ready")
async def readiness():
    """Ready only when the database answers."""
    manager = db_module.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "checks": {"database": "unreachable"}},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
