"""
System Endpoints
================

Health and recent log records.
"""

from fastapi import APIRouter, Depends, Query
import logging

from ...config.paths import OutputPaths
from ...services.logging_service import get_ring_handler
from ...utils.health_monitor import get_health_monitor
from ...utils.response_models import HealthResponse
from ..dependencies import get_output_paths

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def check_system_health(paths: OutputPaths = Depends(get_output_paths)):
    health_status = get_health_monitor().check_system_health(paths)
    artifacts = health_status.get('artifacts', {})
    return HealthResponse(
        status="success",
        memory_usage_mb=float(health_status.get('memory_usage_mb', 0.0)),
        uptime_seconds=float(health_status.get('uptime_seconds', 0.0)),
        overall_status=str(health_status.get('overall_status', 'unknown')),
        output_dir=str(paths.root),
        artifacts_ready=bool(artifacts) and all(artifacts.values()),
        details={"artifacts": artifacts},
    )


@router.get("/logs")
def get_recent_logs(limit: int = Query(500, ge=1, le=5000)):
    ring = get_ring_handler()
    return {"logs": ring.get_recent(limit)}
