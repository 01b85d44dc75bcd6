"""
Pipeline outcomes and run reporting

Every geometric operation in the postal pipeline returns a GeometryResult
instead of raising. Skips are collected into a RunReport so a batch run can be
audited after the fact without aborting on a handful of malformed inputs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import pandas as pd
from shapely.errors import ShapelyError

logger = logging.getLogger(__name__)

# Errors shapely/GEOS raise on malformed or invalid input.
GEOMETRY_ERRORS = (ShapelyError, ValueError, TypeError, IndexError)


class SkipReason(str, Enum):
    """Why a single feature or fold increment was left out."""

    MISSING_GEOMETRY = "missing_geometry"
    INVALID_GEOMETRY = "invalid_geometry"
    NO_OVERLAP = "no_overlap"
    EMPTY_RESULT = "empty_result"
    UNION_FAILED = "union_failed"
    INTERSECTION_FAILED = "intersection_failed"
    DIFFERENCE_FAILED = "difference_failed"
    CENTROID_FAILED = "centroid_failed"
    AREA_EXCEEDS_MAX = "area_exceeds_max"
    MISSING_CODE = "missing_code"
    NO_CANDIDATES = "no_candidates"


@dataclass(frozen=True)
class GeometryResult:
    """
    Outcome of one geometric operation: either a geometry or a skip marker.
    """

    geometry: Any = None
    reason: Optional[SkipReason] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reason is None and self.geometry is not None

    @classmethod
    def success(cls, geometry: Any) -> "GeometryResult":
        return cls(geometry=geometry)

    @classmethod
    def skip(cls, reason: SkipReason, detail: Optional[str] = None) -> "GeometryResult":
        return cls(reason=reason, detail=detail)


@dataclass(frozen=True)
class SkipRecord:
    stage: str
    reason: SkipReason
    index: Optional[int] = None
    code: Optional[str] = None
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage,
            "reason": self.reason.value,
            "index": self.index,
            "code": self.code,
            "detail": self.detail,
        }


@dataclass
class RunReport:
    """
    Aggregate record of one pipeline run.

    Stages push skip markers and counters here; nothing is surfaced to the
    caller individually.
    """

    mode: str = ""
    skips: List[SkipRecord] = field(default_factory=list)
    counts: Dict[str, int] = field(default_factory=dict)

    def record_skip(
        self,
        stage: str,
        reason: SkipReason,
        index: Optional[int] = None,
        code: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> None:
        record = SkipRecord(stage=stage, reason=reason, index=index, code=code, detail=detail)
        self.skips.append(record)
        logger.debug(f"⏭️ {stage}: skipped index={index} code={code} reason={reason.value} {detail or ''}")

    def record_result(
        self,
        stage: str,
        result: GeometryResult,
        index: Optional[int] = None,
        code: Optional[str] = None,
    ) -> None:
        if result.reason is not None:
            self.record_skip(stage, result.reason, index=index, code=code, detail=result.detail)

    def set_count(self, key: str, value: int) -> None:
        self.counts[key] = int(value)

    def skip_count(self, stage: Optional[str] = None) -> int:
        if stage is None:
            return len(self.skips)
        return sum(1 for s in self.skips if s.stage == stage)

    def summary_frame(self) -> pd.DataFrame:
        """Skip counts grouped by stage and reason."""
        if not self.skips:
            return pd.DataFrame(columns=["stage", "reason", "skipped"])
        frame = pd.DataFrame([s.to_dict() for s in self.skips])
        return (
            frame.groupby(["stage", "reason"], sort=True)
            .size()
            .reset_index(name="skipped")
        )

    def to_dict(self) -> Dict[str, Any]:
        summary = self.summary_frame()
        return {
            "mode": self.mode,
            "counts": dict(self.counts),
            "skipped_total": len(self.skips),
            "skip_summary": [
                {"stage": row.stage, "reason": row.reason, "skipped": int(row.skipped)}
                for row in summary.itertuples(index=False)
            ],
            "skips": [s.to_dict() for s in self.skips],
        }
