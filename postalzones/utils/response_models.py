"""
Shared Response Models
Consistent response formats for the artifact API
"""
from pydantic import BaseModel
from typing import Dict, Any, Optional, List


class BaseResponse(BaseModel):
    """Base response format"""
    status: str  # "success" or "error"
    error: Optional[str] = None


class CodesResponse(BaseResponse):
    """Distinct postal codes present in the dissolved artifact"""
    count: int = 0
    codes: List[str] = []


class ArtifactInfo(BaseModel):
    name: str
    path: Optional[str] = None
    available: bool = False
    size_bytes: Optional[int] = None


class ArtifactsResponse(BaseResponse):
    artifacts: List[ArtifactInfo] = []


class HealthResponse(BaseResponse):
    """Response model for health check endpoints"""
    memory_usage_mb: float = 0.0
    uptime_seconds: float = 0.0
    overall_status: str = "unknown"
    output_dir: Optional[str] = None
    artifacts_ready: bool = False
    details: Optional[Dict[str, Any]] = None


class LookupResponse(BaseResponse):
    """Normalized form of a user-entered code and whether the zone exists"""
    query: str
    code: Optional[str] = None
    exists: bool = False
