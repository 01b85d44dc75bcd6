"""
Gap building and assignment

Gaps are the parts of the mask no postal polygon covers. Each gap small
enough to be a sliver is grafted onto the postal code whose centroid lies
nearest to the gap's centroid by great-circle distance.
"""
import logging
import math
from typing import List, Optional, Sequence

import numpy as np
from shapely.geometry import MultiPolygon
from shapely.geometry.base import BaseGeometry

from ..calculators import GeodesicAreaCalculator, HaversineCalculator
from .geometry_ops import safe_centroid, safe_difference
from .models import GapPolygon, PostalFeature
from .outcomes import GEOMETRY_ERRORS, RunReport, SkipReason

logger = logging.getLogger(__name__)

BUILD_STAGE = "gap_build"
ASSIGN_STAGE = "gap_assign"


def build_gaps(
    mask: BaseGeometry,
    covered: Optional[BaseGeometry],
    report: Optional[RunReport] = None,
    area_calculator: Optional[GeodesicAreaCalculator] = None,
) -> List[GapPolygon]:
    """
    Decompose mask minus covered area into one GapPolygon per connected part

    A failed or empty difference means no gaps, not an error.
    """
    if covered is None:
        return []

    result = safe_difference(mask, covered)
    if not result.ok:
        if report is not None and result.reason is not SkipReason.EMPTY_RESULT:
            report.record_result(BUILD_STAGE, result)
        return []

    calculator = area_calculator or GeodesicAreaCalculator.spherical()
    difference = result.geometry
    parts = list(difference.geoms) if isinstance(difference, MultiPolygon) else [difference]

    gaps: List[GapPolygon] = []
    for index, part in enumerate(parts):
        if part.is_empty:
            continue
        try:
            area = calculator.area_m2(part)
        except GEOMETRY_ERRORS as e:
            if report is not None:
                report.record_skip(BUILD_STAGE, SkipReason.INVALID_GEOMETRY, index=index, detail=str(e))
            continue
        gaps.append(GapPolygon(geometry=part, area=area))

    logger.info(f"🕳️ Found {len(gaps)} gap polygons")
    if report is not None:
        report.set_count("gaps_found", len(gaps))
    return gaps


class NearestCentroidIndex:
    """
    Centroid cache over candidate features for nearest-neighbour lookup.

    The scan is exhaustive; on equal distances the candidate that comes first
    in input order wins.
    """

    def __init__(self, features: Sequence[PostalFeature], report: Optional[RunReport] = None):
        self.features: List[PostalFeature] = []
        lats: List[float] = []
        lngs: List[float] = []

        for feature in features:
            result = safe_centroid(feature.geometry)
            if not result.ok:
                if report is not None:
                    report.record_result(ASSIGN_STAGE, result, index=feature.index, code=feature.code)
                continue
            self.features.append(feature)
            lngs.append(result.geometry.x)
            lats.append(result.geometry.y)

        self.lats = np.asarray(lats, dtype=float)
        self.lngs = np.asarray(lngs, dtype=float)

    def __len__(self) -> int:
        return len(self.features)

    def nearest(self, lat: float, lng: float) -> Optional[PostalFeature]:
        if not self.features:
            return None
        distances = HaversineCalculator.distances_to(lat, lng, self.lats, self.lngs, units="kilometers")
        # argmin returns the first index among equal minima
        return self.features[int(np.argmin(distances))]


def assign_gaps(
    features: Sequence[PostalFeature],
    gaps: Sequence[GapPolygon],
    gap_area_max: float = math.inf,
    report: Optional[RunReport] = None,
) -> List[PostalFeature]:
    """
    Give each small gap the code of the nearest postal feature

    Args:
        features: Candidate features (clipped, or raw in gapfill-border mode)
        gaps: Gaps from build_gaps
        gap_area_max: Gaps larger than this many square meters stay uncovered
        report: Receives skip records

    Returns:
        One new feature per assigned gap, carrying the winner's properties and
        the gap's own geometry
    """
    if not gaps:
        return []

    index = NearestCentroidIndex(features, report)
    additions: List[PostalFeature] = []

    for gap_index, gap in enumerate(gaps):
        if gap.area > gap_area_max:
            if report is not None:
                report.record_skip(
                    ASSIGN_STAGE, SkipReason.AREA_EXCEEDS_MAX, index=gap_index,
                    detail=f"{gap.area:.1f} m2 > {gap_area_max}",
                )
            continue

        centroid = safe_centroid(gap.geometry)
        if not centroid.ok:
            if report is not None:
                report.record_result(ASSIGN_STAGE, centroid, index=gap_index)
            continue

        winner = index.nearest(centroid.geometry.y, centroid.geometry.x)
        if winner is None:
            if report is not None:
                report.record_skip(ASSIGN_STAGE, SkipReason.NO_CANDIDATES, index=gap_index)
            continue

        additions.append(PostalFeature(
            code=winner.code,
            geometry=gap.geometry,
            properties=dict(winner.properties),
        ))

    limit = "Infinity" if math.isinf(gap_area_max) else gap_area_max
    logger.info(f"🧩 Filling {len(additions)} gaps (area <= {limit} m²)")
    if report is not None:
        report.set_count("gaps_assigned", len(additions))
    return additions
