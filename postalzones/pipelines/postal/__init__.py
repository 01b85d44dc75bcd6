"""
Postal zone geometry pipeline
Mask normalization, boundary clipping, gap fill, dissolve and label points
"""
from .pipeline import PostalBoundaryPipeline, PipelineResult
from .modes import Stage, STAGE_PLANS
from .outcomes import RunReport, SkipReason, GeometryResult

__all__ = [
    "PostalBoundaryPipeline",
    "PipelineResult",
    "Stage",
    "STAGE_PLANS",
    "RunReport",
    "SkipReason",
    "GeometryResult",
]
