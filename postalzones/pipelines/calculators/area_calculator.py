"""
Geodesic area of lon/lat polygons.

Two earth models are available: the WGS84 ellipsoid, and a sphere of radius
6378137 m (the model web-map tooling such as turf uses for polygon areas).
The two disagree by a few tenths of a percent at Nordic latitudes, so a gap
near the size threshold can land on either side depending on the model.
"""
import logging

from pyproj import Geod
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.polygon import orient

logger = logging.getLogger(__name__)

SPHERE_RADIUS_M = 6378137.0


class GeodesicAreaCalculator:
    """Square-meter areas for polygons stored in geographic coordinates."""

    def __init__(self, ellps: str = "WGS84", geod: Geod = None):
        self.geod = geod if geod is not None else Geod(ellps=ellps)

    @classmethod
    def spherical(cls, radius: float = SPHERE_RADIUS_M) -> "GeodesicAreaCalculator":
        """Areas on a sphere; the default radius matches turf.area."""
        return cls(geod=Geod(a=radius, b=radius))

    def area_m2(self, geometry) -> float:
        # Holes only subtract when rings are consistently oriented.
        if isinstance(geometry, Polygon):
            geometry = orient(geometry, sign=1.0)
        elif isinstance(geometry, MultiPolygon):
            geometry = MultiPolygon([orient(part, sign=1.0) for part in geometry.geoms])
        area, _perimeter = self.geod.geometry_area_perimeter(geometry)
        return abs(area)
