"""
Postal source conversion

The upstream postal dataset arrives as a mapping of code -> record, where the
record's "geojson" field holds a geometry, a Feature or a JSON string of
either. This module turns it into a FeatureCollection keyed by zero-padded
codes, and parses FeatureCollections into PostalFeature objects.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...utils.codes import pad_code
from ...utils.file_handler import read_geojson
from .geometry_ops import parse_geometry
from .models import PostalFeature, feature_collection
from .outcomes import RunReport, SkipReason

logger = logging.getLogger(__name__)

STAGE = "postal_load"


def _extract_geometry(value: Any) -> Optional[Dict[str, Any]]:
    geometry = value
    if isinstance(geometry, str):
        try:
            geometry = json.loads(geometry)
        except json.JSONDecodeError:
            return None

    if not isinstance(geometry, dict):
        return None

    if geometry.get("type") == "Feature" and geometry.get("geometry"):
        geometry = geometry["geometry"]

    if not geometry.get("type") or not geometry.get("coordinates"):
        return None
    return geometry


def convert_raw_postal(raw: Dict[str, Any], code_property: str = "code") -> Dict[str, Any]:
    """
    Convert a code -> {"geojson": ...} mapping into a FeatureCollection

    Entries without a usable geometry are skipped.
    """
    features = []
    skipped = 0
    for code, item in raw.items():
        if not isinstance(item, dict) or not item.get("geojson"):
            skipped += 1
            continue

        geometry = _extract_geometry(item["geojson"])
        if geometry is None:
            skipped += 1
            continue

        features.append({
            "type": "Feature",
            "properties": {code_property: pad_code(code)},
            "geometry": geometry,
        })

    logger.info(f"📮 Converted {len(features)} postal entries ({skipped} skipped)")
    return feature_collection(features)


def is_feature_collection(document: Any) -> bool:
    return isinstance(document, dict) and document.get("type") == "FeatureCollection"


def load_postal_collection(path: Union[str, Path], code_property: str = "code") -> Dict[str, Any]:
    """Read the postal source, converting the raw mapping format when needed."""
    document = read_geojson(path)
    if is_feature_collection(document):
        logger.info(f"📮 Loaded {len(document.get('features') or [])} postal features from {path}")
        return document
    logger.info(f"📮 {path} is not a FeatureCollection, converting raw postal mapping")
    return convert_raw_postal(document, code_property)


def parse_postal_features(
    collection: Dict[str, Any],
    code_property: str = "code",
    report: Optional[RunReport] = None,
) -> List[PostalFeature]:
    """
    Parse features into PostalFeature objects

    Features without geometry or with unparsable coordinates are dropped and
    recorded. Codes are zero-padded; the untouched input dict is kept on each
    feature for pass-through output.
    """
    parsed: List[PostalFeature] = []
    for index, feature in enumerate(collection.get("features") or []):
        if not isinstance(feature, dict):
            if report is not None:
                report.record_skip(STAGE, SkipReason.MISSING_GEOMETRY, index=index)
            continue

        properties = dict(feature.get("properties") or {})
        code = pad_code(properties.get(code_property))
        if code is not None:
            properties[code_property] = code

        result = parse_geometry(feature.get("geometry"))
        if not result.ok:
            if report is not None:
                report.record_result(STAGE, result, index=index, code=code)
            continue

        parsed.append(PostalFeature(
            code=code,
            geometry=result.geometry,
            properties=properties,
            index=index,
            source=feature,
        ))
    return parsed
