"""
Feature types flowing through the postal pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shapely.geometry import mapping
from shapely.geometry.base import BaseGeometry


@dataclass
class PostalFeature:
    """
    A postal polygon with its properties.

    Used for raw input features, clipped features and gap additions alike.
    `source` holds the input dict while the geometry is still the one that
    was read. Pass-through output reuses it, with the normalized properties
    swapped in when normalization changed them.
    """

    code: Optional[str]
    geometry: BaseGeometry
    properties: Dict[str, Any] = field(default_factory=dict)
    index: Optional[int] = None
    source: Optional[Dict[str, Any]] = None

    def derive(self, geometry: BaseGeometry) -> "PostalFeature":
        """Same code and properties, new geometry."""
        return PostalFeature(
            code=self.code,
            geometry=geometry,
            properties=dict(self.properties),
            index=self.index,
        )

    def to_geojson(self) -> Dict[str, Any]:
        if self.source is not None:
            if self.source.get("properties") == self.properties:
                return self.source
            return {**self.source, "properties": dict(self.properties)}
        return {
            "type": "Feature",
            "properties": dict(self.properties),
            "geometry": mapping(self.geometry),
        }


@dataclass
class GapPolygon:
    """A connected uncovered region inside the mask."""

    geometry: BaseGeometry
    area: float


@dataclass
class DissolvedFeature:
    code: str
    geometry: BaseGeometry

    def to_geojson(self, code_property: str) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "properties": {code_property: self.code},
            "geometry": mapping(self.geometry),
        }


@dataclass
class LabelPoint:
    code: str
    point: BaseGeometry

    def to_geojson(self, code_property: str) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "properties": {code_property: self.code},
            "geometry": mapping(self.point),
        }


def feature_collection(features: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": features}
