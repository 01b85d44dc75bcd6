"""
Distance and area calculators for geographic (lon/lat) geometry.
"""
from .haversine_calculator import HaversineCalculator
from .area_calculator import GeodesicAreaCalculator

__all__ = ["HaversineCalculator", "GeodesicAreaCalculator"]
