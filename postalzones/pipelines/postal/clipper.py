"""
Boundary Clipper

Intersects every postal polygon with the unified mask. A vectorized
bounding-box test rejects features that cannot overlap the mask before any
exact intersection is attempted; it never rejects a true overlap.
"""
import logging
from typing import List, Optional, Sequence

import geopandas as gpd
import numpy as np
from shapely.geometry.base import BaseGeometry

from .geometry_ops import check_polygonal, safe_intersection
from .models import PostalFeature
from .outcomes import GEOMETRY_ERRORS, RunReport, SkipReason

logger = logging.getLogger(__name__)

STAGE = "clip"


def bbox_overlap_mask(features: Sequence[PostalFeature], mask: BaseGeometry) -> np.ndarray:
    """
    Boolean array: True where a feature's bounding box overlaps the mask's.

    Empty geometries have NaN bounds and compare False.
    """
    if not features:
        return np.zeros(0, dtype=bool)

    mask_minx, mask_miny, mask_maxx, mask_maxy = mask.bounds
    bounds = gpd.GeoSeries([f.geometry for f in features]).bounds

    overlaps = (
        (bounds["minx"] <= mask_maxx)
        & (bounds["maxx"] >= mask_minx)
        & (bounds["miny"] <= mask_maxy)
        & (bounds["maxy"] >= mask_miny)
    )
    return overlaps.to_numpy(dtype=bool)


def clip_features(
    features: Sequence[PostalFeature],
    mask: BaseGeometry,
    report: Optional[RunReport] = None,
    progress_every: int = 100,
) -> List[PostalFeature]:
    """
    Clip postal features to the mask

    Args:
        features: Parsed postal features, in input order
        mask: Unified mask geometry
        report: Receives a skip record for each dropped feature
        progress_every: Log progress every N features

    Returns:
        Clipped features in input order; features with no surviving overlap
        or with geometry errors are absent
    """
    total = len(features)
    try:
        candidates = bbox_overlap_mask(features, mask)
    except GEOMETRY_ERRORS as e:
        # Fall back to exact intersection for every feature
        logger.warning(f"⚠️ Vectorized bbox prefilter failed, testing every feature: {e}")
        candidates = np.ones(total, dtype=bool)

    clipped: List[PostalFeature] = []
    for position, feature in enumerate(features):
        processed = position + 1
        if processed % progress_every == 0:
            logger.info(f"✂️ Clipping progress: {processed}/{total}")

        if not candidates[position]:
            if report is not None:
                report.record_skip(STAGE, SkipReason.NO_OVERLAP, index=feature.index, code=feature.code)
            continue

        checked = check_polygonal(feature.geometry)
        if not checked.ok:
            if report is not None:
                report.record_result(STAGE, checked, index=feature.index, code=feature.code)
            continue

        result = safe_intersection(checked.geometry, mask)
        if not result.ok:
            if report is not None:
                report.record_result(STAGE, result, index=feature.index, code=feature.code)
            continue

        clipped.append(feature.derive(result.geometry))

    logger.info(f"✂️ Clipped to {len(clipped)} of {total} features")
    if report is not None:
        report.set_count("clipped_features", len(clipped))
    return clipped
