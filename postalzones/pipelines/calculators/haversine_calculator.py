"""
Haversine Calculator Module
Great-circle distances for nearest-centroid matching
"""
import math
import logging
from typing import Sequence

import numpy as np

logger = logging.getLogger(__name__)


class HaversineCalculator:
    """
    Spherical great-circle distances using the Haversine formula.

    The radius is the mean Earth radius used by web-mapping toolkits, so
    distances line up with what the map client measures.
    """

    EARTH_RADIUS_METERS = 6371008.8

    UNIT_FACTORS = {
        "meters": 1.0,
        "kilometers": 1.0 / 1000.0,
        "miles": 0.000621371,
        "feet": 3.28084,
    }

    @staticmethod
    def calculate_distance(
        lat1: float,
        lng1: float,
        lat2: float,
        lng2: float,
        units: str = "kilometers"
    ) -> float:
        """
        Calculate distance between two points using Haversine formula

        Args:
            lat1, lng1: First point coordinates
            lat2, lng2: Second point coordinates
            units: "meters", "feet", "miles", or "kilometers"

        Returns:
            float: Distance in specified units
        """
        if units not in HaversineCalculator.UNIT_FACTORS:
            raise ValueError(f"Unsupported distance unit: {units}")

        lat1_rad, lng1_rad = math.radians(lat1), math.radians(lng1)
        lat2_rad, lng2_rad = math.radians(lat2), math.radians(lng2)

        dlat = lat2_rad - lat1_rad
        dlng = lng2_rad - lng1_rad

        a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2) ** 2
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

        distance_meters = HaversineCalculator.EARTH_RADIUS_METERS * c
        return distance_meters * HaversineCalculator.UNIT_FACTORS[units]

    @staticmethod
    def distances_to(
        lat: float,
        lng: float,
        lats: Sequence[float],
        lngs: Sequence[float],
        units: str = "kilometers"
    ) -> np.ndarray:
        """
        Vectorized distances from one point to many candidate points.

        Same formula as calculate_distance, evaluated over numpy arrays.
        """
        if units not in HaversineCalculator.UNIT_FACTORS:
            raise ValueError(f"Unsupported distance unit: {units}")

        lat_rad = np.radians(lat)
        lng_rad = np.radians(lng)
        lats_rad = np.radians(np.asarray(lats, dtype=float))
        lngs_rad = np.radians(np.asarray(lngs, dtype=float))

        dlat = lats_rad - lat_rad
        dlng = lngs_rad - lng_rad

        a = np.sin(dlat / 2) ** 2 + np.cos(lat_rad) * np.cos(lats_rad) * np.sin(dlng / 2) ** 2
        c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

        return HaversineCalculator.EARTH_RADIUS_METERS * c * HaversineCalculator.UNIT_FACTORS[units]
