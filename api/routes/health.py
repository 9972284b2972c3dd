"""
Health check endpoints.

Provides endpoints for monitoring and load balancer health checks.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_record_service
from core.logging import get_logger
from manager.record_service import RecordService


logger = get_logger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """
    Basic health check.

    Returns 200 if the service is running.
    Used by load balancers and orchestration systems.
    """
    return {
        "status": "healthy",
        "service": "space-dashboard",
    }


@router.get("/ready")
async def readiness_check(service: RecordService = Depends(get_record_service)):
    """
    Readiness check.

    Returns 200 when the record store answers a ping, 503 otherwise.
    """
    store_ok = await service.ping()
    body = {
        "status": "ready" if store_ok else "unavailable",
        "checks": {"database": "ok" if store_ok else "unreachable"},
    }
    if not store_ok:
        logger.warning("Readiness check failed", checks=body["checks"])
        return JSONResponse(status_code=503, content=body)
    return body
