import json

from .outcomes import GeometryResult, RunReport, SkipReason


def test_geometry_result_flags() -> None:
    assert GeometryResult.success(object()).ok
    skipped = GeometryResult.skip(SkipReason.UNION_FAILED, "TopologyException")
    assert not skipped.ok
    assert skipped.detail == "TopologyException"


def test_report_summary_groups_by_stage_and_reason() -> None:
    report = RunReport(mode="coast")
    report.record_skip("clip", SkipReason.NO_OVERLAP, index=1)
    report.record_skip("clip", SkipReason.NO_OVERLAP, index=2)
    report.record_skip("clip", SkipReason.INVALID_GEOMETRY, index=3, code="0150")
    report.record_skip("labels", SkipReason.CENTROID_FAILED, code="0151")
    report.set_count("clipped_features", 10)

    summary = report.summary_frame()
    rows = {(r.stage, r.reason): r.skipped for r in summary.itertuples(index=False)}
    assert rows[("clip", "no_overlap")] == 2
    assert rows[("clip", "invalid_geometry")] == 1
    assert report.skip_count("clip") == 3

    data = report.to_dict()
    assert data["skipped_total"] == 4
    assert data["counts"] == {"clipped_features": 10}
    # Must be JSON-serializable as written to the report file
    json.dumps(data)


def test_empty_report_summary() -> None:
    report = RunReport()
    assert report.summary_frame().empty
    assert report.to_dict()["skip_summary"] == []
