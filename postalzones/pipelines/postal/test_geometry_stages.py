"""
Stage-level checks for mask loading, union fold, clipping, gaps, dissolve
and labels. Coordinates are lon/lat boxes near 59-60N.
"""
import math

from shapely.geometry import Polygon, box, mapping, shape

from .clipper import bbox_overlap_mask, clip_features
from .converter import parse_postal_features
from .dissolver import dissolve_by_code
from .gaps import NearestCentroidIndex, assign_gaps, build_gaps
from .geometry_ops import vertex_centroid
from .labels import build_label_points
from .mask_loader import mask_geometries, normalize_mask
from .models import GapPolygon, PostalFeature
from .outcomes import RunReport, SkipReason
from .unifier import fold_union


def _bowtie(x: float = 10.0, y: float = 59.0) -> Polygon:
    return Polygon([(x, y), (x + 1, y + 1), (x + 1, y), (x, y + 1), (x, y)])


def _feature(code, geometry, index=None) -> PostalFeature:
    return PostalFeature(code=code, geometry=geometry, properties={"code": code}, index=index)


# ----- mask normalization -----

def test_normalize_bare_geometry_wraps_in_feature() -> None:
    geometry = mapping(box(0, 0, 1, 1))
    features = normalize_mask(geometry)
    assert len(features) == 1
    assert features[0]["type"] == "Feature"
    assert features[0]["properties"] == {}
    assert features[0]["geometry"] is geometry


def test_normalize_single_feature_and_collection() -> None:
    feature = {"type": "Feature", "properties": {"name": "land"}, "geometry": mapping(box(0, 0, 1, 1))}
    assert normalize_mask(feature) == [feature]

    collection = {"type": "FeatureCollection", "features": [feature, feature]}
    normalized = normalize_mask(collection)
    assert len(normalized) == 2
    assert normalized[0] is feature


def test_normalize_bare_list_of_features_and_geometries() -> None:
    feature = {"type": "Feature", "properties": {}, "geometry": mapping(box(0, 0, 1, 1))}
    geometry = mapping(box(1, 0, 2, 1))
    normalized = normalize_mask([feature, geometry])

    assert normalized[0] is feature
    assert normalized[1] == {"type": "Feature", "properties": {}, "geometry": geometry}
    assert len(mask_geometries(normalized)) == 2


# ----- union fold -----

def test_fold_union_empty_is_none() -> None:
    assert fold_union([]) is None


def test_fold_union_skips_invalid_step_and_keeps_accumulator() -> None:
    report = RunReport()
    merged = fold_union([box(0, 0, 1, 1), _bowtie(5, 5), box(1, 0, 2, 1)], report=report, stage="mask_union")

    assert merged is not None
    assert math.isclose(merged.area, 2.0)
    assert report.skip_count("mask_union") == 1
    assert report.skips[0].reason is SkipReason.INVALID_GEOMETRY
    assert report.skips[0].index == 1


def test_fold_union_all_invalid_is_none() -> None:
    assert fold_union([_bowtie(), None]) is None


# ----- clipping -----

def test_bbox_prefilter_rejects_only_disjoint_boxes() -> None:
    mask = box(10, 59, 12, 60)
    features = [
        _feature("0001", box(11, 59.5, 13, 61)),   # overlaps
        _feature("0002", box(20, 59, 21, 60)),     # far east
        _feature("0003", box(12, 60, 13, 61)),     # touches corner
    ]
    assert bbox_overlap_mask(features, mask).tolist() == [True, False, True]


def test_clip_drops_self_intersecting_feature_and_continues() -> None:
    mask = box(9, 58, 14, 61)
    features = [
        _feature("0150", box(10, 59, 11, 60), index=0),
        _feature("0151", _bowtie(11, 59), index=1),
        _feature("0152", box(12, 59, 13, 60), index=2),
    ]
    report = RunReport()
    clipped = clip_features(features, mask, report=report)

    assert [f.code for f in clipped] == ["0150", "0152"]
    assert report.skip_count("clip") == 1
    assert report.skips[0].reason is SkipReason.INVALID_GEOMETRY
    assert report.skips[0].code == "0151"


def test_clip_trims_to_mask_and_drops_touching_only() -> None:
    mask = box(10, 59, 12, 60)
    features = [
        _feature("0150", box(9, 59, 11, 60), index=0),
        _feature("0151", box(12, 59, 13, 60), index=1),  # shares an edge only
    ]
    report = RunReport()
    clipped = clip_features(features, mask, report=report)

    assert len(clipped) == 1
    assert clipped[0].code == "0150"
    assert clipped[0].geometry.equals(box(10, 59, 11, 60))
    assert clipped[0].properties == {"code": "0150"}
    assert report.skips[0].reason is SkipReason.EMPTY_RESULT


# ----- gaps -----

def test_build_gaps_splits_multipart_difference() -> None:
    mask = box(10, 59, 15, 60)
    covered = fold_union([box(10, 59, 11, 60), box(12, 59, 13, 60), box(14, 59, 15, 60)])
    gaps = build_gaps(mask, covered)

    assert len(gaps) == 2
    assert all(g.geometry.geom_type == "Polygon" for g in gaps)
    assert all(g.area > 1e9 for g in gaps)


def test_build_gaps_full_coverage_or_no_coverage_is_empty() -> None:
    mask = box(10, 59, 11, 60)
    assert build_gaps(mask, box(9, 58, 12, 61)) == []
    assert build_gaps(mask, None) == []


def test_assign_gap_to_nearest_centroid() -> None:
    features = [
        _feature("0150", box(10, 59, 11, 60)),
        _feature("0151", box(13, 59, 14, 60)),
    ]
    gap = GapPolygon(geometry=box(11, 59, 12, 60), area=100.0)
    additions = assign_gaps(features, [gap])

    assert len(additions) == 1
    assert additions[0].code == "0150"
    assert additions[0].geometry.equals(gap.geometry)


def test_assign_gap_ignores_gaps_above_max_area() -> None:
    features = [_feature("0150", box(10, 59, 11, 60))]
    gaps = [
        GapPolygon(geometry=box(11, 59, 12, 60), area=5000.0),
        GapPolygon(geometry=box(11, 60, 12, 61), area=500.0),
    ]
    report = RunReport()
    additions = assign_gaps(features, gaps, gap_area_max=1000.0, report=report)

    assert len(additions) == 1
    assert additions[0].geometry.equals(gaps[1].geometry)
    assert [s.reason for s in report.skips] == [SkipReason.AREA_EXCEEDS_MAX]


def test_assign_gap_without_candidates_emits_nothing() -> None:
    gap = GapPolygon(geometry=box(11, 59, 12, 60), area=1.0)
    report = RunReport()
    assert assign_gaps([], [gap], report=report) == []
    assert report.skips[0].reason is SkipReason.NO_CANDIDATES


def test_equidistant_candidates_resolve_to_first() -> None:
    same = box(10, 59, 11, 60)
    index = NearestCentroidIndex([_feature("0150", same), _feature("0151", same)])
    assert index.nearest(59.5, 12.0).code == "0150"

    index = NearestCentroidIndex([_feature("0151", same), _feature("0150", same)])
    assert index.nearest(59.5, 12.0).code == "0151"


def _densified_east_edge() -> Polygon:
    east = [(11, 59 + 0.05 * i) for i in range(1, 20)]
    return Polygon([(10, 59), (11, 59), *east, (11, 60), (10, 60), (10, 59)])


def test_vertex_centroid_follows_vertex_density() -> None:
    polygon = _densified_east_edge()
    centroid = vertex_centroid(polygon)

    assert math.isclose(polygon.centroid.x, 10.5)
    assert math.isclose(centroid.x, 251 / 23)
    assert math.isclose(centroid.y, 59.5)


def test_vertex_centroid_skips_closing_vertex() -> None:
    centroid = vertex_centroid(Polygon([(0, 0), (3, 0), (0, 3), (0, 0)]))
    assert math.isclose(centroid.x, 1.0)
    assert math.isclose(centroid.y, 1.0)


def test_gap_goes_to_nearest_vertex_centroid() -> None:
    features = [
        _feature("0150", _densified_east_edge()),
        _feature("0151", box(12, 59, 12.9, 60)),
    ]
    gap = GapPolygon(geometry=box(11, 59, 12, 60), area=1.0)
    additions = assign_gaps(features, [gap])

    # By area centroid 0151 would be nearer (0.95 vs 1.0 degrees)
    assert [a.code for a in additions] == ["0150"]


# ----- dissolve and labels -----

def test_dissolve_merges_same_code_in_first_seen_order() -> None:
    features = [
        _feature("0151", box(12, 59, 13, 60)),
        _feature("0150", box(10, 59, 11, 60)),
        _feature("0151", box(13, 59, 14, 60)),
        _feature(None, box(20, 59, 21, 60)),
    ]
    report = RunReport()
    dissolved = dissolve_by_code(features, report=report)

    assert [d.code for d in dissolved] == ["0151", "0150"]
    assert dissolved[0].geometry.equals(box(12, 59, 14, 60))
    assert report.skips[0].reason is SkipReason.MISSING_CODE


def test_dissolve_is_idempotent() -> None:
    features = [
        _feature("0150", box(10, 59, 11, 60)),
        _feature("0150", box(11, 59, 11.5, 60)),
        _feature("0151", box(12, 59, 13, 60)),
    ]
    first = dissolve_by_code(features)
    collection = {"type": "FeatureCollection", "features": [d.to_geojson("code") for d in first]}
    second = dissolve_by_code(parse_postal_features(collection, "code"))

    assert [d.code for d in second] == [d.code for d in first]
    for a, b in zip(first, second):
        assert a.geometry.equals(b.geometry)


def test_labels_match_dissolved_codes() -> None:
    dissolved = dissolve_by_code([
        _feature("0150", box(10, 59, 11, 60)),
        _feature("0151", box(12, 59, 13, 60)),
    ])
    labels = build_label_points(dissolved)

    assert {label.code for label in labels} == {d.code for d in dissolved}
    assert labels[0].point.geom_type == "Point"
    assert math.isclose(labels[0].point.x, 10.5)
    assert math.isclose(labels[0].point.y, 59.5)
    assert shape(labels[0].to_geojson("code")["geometry"]).equals(labels[0].point)
