"""
Mask loading

A mask file may hold a bare geometry, a single Feature, a FeatureCollection
or a bare list of features. normalize_mask flattens them into a list of features
without validating anything; geometry problems surface later as skips.
"""
import logging
from typing import Any, Dict, List, Optional

from shapely.geometry.base import BaseGeometry

from .geometry_ops import parse_geometry
from .outcomes import RunReport

logger = logging.getLogger(__name__)

STAGE = "mask_load"


def _as_feature(item: Any) -> Dict[str, Any]:
    if isinstance(item, dict) and item.get("type") == "Feature":
        return item
    return {"type": "Feature", "properties": {}, "geometry": item}


def normalize_mask(document: Any) -> List[Dict[str, Any]]:
    if isinstance(document, list):
        return [_as_feature(item) for item in document]
    doc_type = document.get("type") if isinstance(document, dict) else None
    if doc_type == "FeatureCollection":
        return list(document.get("features") or [])
    return [_as_feature(document)]


def mask_geometries(features: List[Dict[str, Any]], report: Optional[RunReport] = None) -> List[BaseGeometry]:
    """Parse mask features into shapely geometries, dropping unparsable ones."""
    geometries = []
    for index, feature in enumerate(features):
        result = parse_geometry((feature or {}).get("geometry"))
        if not result.ok:
            if report is not None:
                report.record_result(STAGE, result, index=index)
            continue
        geometries.append(result.geometry)
    return geometries

