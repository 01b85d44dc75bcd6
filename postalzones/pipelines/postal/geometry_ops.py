"""
Guarded shapely operations.

Each helper returns a GeometryResult rather than raising, so callers can
record a skip reason and move on to the next feature.
"""
import logging
from typing import Any, Dict, Optional

import numpy as np
import shapely
from shapely.geometry import GeometryCollection, MultiPolygon, Point, Polygon, shape
from shapely.geometry.base import BaseGeometry

from .outcomes import GEOMETRY_ERRORS, GeometryResult, SkipReason

logger = logging.getLogger(__name__)

POLYGONAL_TYPES = ("Polygon", "MultiPolygon")


def parse_geometry(geometry: Optional[Dict[str, Any]]) -> GeometryResult:
    """Build a shapely geometry from a GeoJSON geometry mapping."""
    if not geometry:
        return GeometryResult.skip(SkipReason.MISSING_GEOMETRY)
    if not isinstance(geometry, dict):
        return GeometryResult.skip(SkipReason.INVALID_GEOMETRY, f"not a geometry mapping: {type(geometry).__name__}")
    try:
        return GeometryResult.success(shape(geometry))
    except GEOMETRY_ERRORS as e:
        return GeometryResult.skip(SkipReason.INVALID_GEOMETRY, f"unparsable geometry: {e}")


def polygonal_part(geometry: Optional[BaseGeometry]) -> Optional[BaseGeometry]:
    """
    Reduce an overlay result to its polygonal content.

    Intersections and differences can yield GeometryCollections holding
    stray points or lines where boundaries touch; only areas are kept.
    Returns None when nothing polygonal remains.
    """
    if geometry is None or geometry.is_empty:
        return None
    if isinstance(geometry, (Polygon, MultiPolygon)):
        return geometry
    if isinstance(geometry, GeometryCollection):
        parts = []
        for part in geometry.geoms:
            if isinstance(part, Polygon) and not part.is_empty:
                parts.append(part)
            elif isinstance(part, MultiPolygon):
                parts.extend(p for p in part.geoms if not p.is_empty)
        if not parts:
            return None
        return parts[0] if len(parts) == 1 else MultiPolygon(parts)
    return None


def check_polygonal(geometry: Optional[BaseGeometry]) -> GeometryResult:
    """Accept only non-empty, valid polygons or multipolygons."""
    if geometry is None:
        return GeometryResult.skip(SkipReason.MISSING_GEOMETRY)
    if geometry.geom_type not in POLYGONAL_TYPES:
        return GeometryResult.skip(SkipReason.INVALID_GEOMETRY, f"not polygonal: {geometry.geom_type}")
    if geometry.is_empty:
        return GeometryResult.skip(SkipReason.EMPTY_RESULT)
    try:
        valid = geometry.is_valid
    except GEOMETRY_ERRORS as e:
        return GeometryResult.skip(SkipReason.INVALID_GEOMETRY, str(e))
    if not valid:
        return GeometryResult.skip(SkipReason.INVALID_GEOMETRY, "self-intersecting or degenerate")
    return GeometryResult.success(geometry)


def _overlay(operation: str, reason: SkipReason, left: BaseGeometry, right: BaseGeometry) -> GeometryResult:
    try:
        result = getattr(left, operation)(right)
    except GEOMETRY_ERRORS as e:
        return GeometryResult.skip(reason, str(e))
    polygonal = polygonal_part(result)
    if polygonal is None:
        return GeometryResult.skip(SkipReason.EMPTY_RESULT)
    return GeometryResult.success(polygonal)


def safe_union(left: BaseGeometry, right: BaseGeometry) -> GeometryResult:
    return _overlay("union", SkipReason.UNION_FAILED, left, right)


def safe_intersection(left: BaseGeometry, right: BaseGeometry) -> GeometryResult:
    return _overlay("intersection", SkipReason.INTERSECTION_FAILED, left, right)


def safe_difference(left: BaseGeometry, right: BaseGeometry) -> GeometryResult:
    return _overlay("difference", SkipReason.DIFFERENCE_FAILED, left, right)


def vertex_centroid(geometry: BaseGeometry) -> Point:
    """
    Mean of the geometry's vertices.

    Every ring of every polygon contributes its vertices once; the repeated
    closing vertex is left out. This is not the area-weighted centroid: a
    densely digitized edge pulls the point towards itself.
    """
    if isinstance(geometry, (Polygon, MultiPolygon)):
        polygons = geometry.geoms if isinstance(geometry, MultiPolygon) else [geometry]
        rings = []
        for polygon in polygons:
            for ring in [polygon.exterior, *polygon.interiors]:
                coords = np.asarray(ring.coords)
                if len(coords) > 1:
                    rings.append(coords[:-1])
        coords = np.concatenate(rings) if rings else np.empty((0, 2))
    else:
        coords = shapely.get_coordinates(geometry)
    if len(coords) == 0:
        return Point()
    x, y = coords[:, :2].mean(axis=0)
    return Point(float(x), float(y))


def safe_centroid(geometry: BaseGeometry) -> GeometryResult:
    """Vertex-mean centroid used for both gap matching and label points."""
    try:
        centroid = vertex_centroid(geometry)
    except GEOMETRY_ERRORS as e:
        return GeometryResult.skip(SkipReason.CENTROID_FAILED, str(e))
    if centroid is None or centroid.is_empty:
        return GeometryResult.skip(SkipReason.CENTROID_FAILED, "empty centroid")
    return GeometryResult.success(centroid)
