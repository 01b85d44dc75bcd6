"""
Sequential union fold

Geometries are merged strictly in input order: the accumulator starts at the
first usable geometry and absorbs each following one. A step that fails
(invalid input, GEOS topology error) is skipped and the previous accumulator
is kept. GEOS union is not exactly associative in floating point, so the fold
order is part of the contract.
"""
import logging
from typing import Optional, Sequence

from shapely.geometry.base import BaseGeometry

from .geometry_ops import check_polygonal, safe_union
from .outcomes import RunReport

logger = logging.getLogger(__name__)


def fold_union(
    geometries: Sequence[Optional[BaseGeometry]],
    report: Optional[RunReport] = None,
    stage: str = "union",
    codes: Optional[Sequence[Optional[str]]] = None,
) -> Optional[BaseGeometry]:
    """
    Left-fold union over geometries.

    Args:
        geometries: Ordered geometries; None entries are skipped
        report: Receives one skip record per dropped input
        stage: Stage name used in skip records
        codes: Optional postal codes aligned with geometries, for the report

    Returns:
        The merged geometry, or None if no input was usable
    """
    merged: Optional[BaseGeometry] = None

    for index, geometry in enumerate(geometries):
        code = codes[index] if codes is not None else None

        checked = check_polygonal(geometry)
        if not checked.ok:
            if report is not None:
                report.record_result(stage, checked, index=index, code=code)
            continue

        if merged is None:
            merged = checked.geometry
            continue

        result = safe_union(merged, checked.geometry)
        if result.ok:
            merged = result.geometry
        elif report is not None:
            report.record_result(stage, result, index=index, code=code)

    return merged
