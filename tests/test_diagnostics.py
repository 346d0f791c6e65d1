"""Tests for geoverlay.core.diagnostics."""

from geoverlay.core.diagnostics import (
    bucket_inventory,
    check_data_quality,
    document_inventory,
    has_warnings,
)
from geoverlay.core.pipeline import build_buckets


def _f(geometry, **props):
    return {"type": "Feature", "geometry": geometry, "properties": props}


DOC = {
    "type": "FeatureCollection",
    "features": [
        _f({"type": "Point", "coordinates": [5.0, 52.0]}),
        _f({"type": "Point", "coordinates": [5.0, 52.0]}, type_name="label"),
        _f({"type": "LineString", "coordinates": [[0, 0], [200, 0]]}),
        _f({"type": "Point", "coordinates": [float("inf"), 0.0]}),
        _f({"type": "MultiPoint", "coordinates": [[0, 0]]}),
        _f(None),
    ],
}


def test_document_inventory():
    inventory = document_inventory(DOC)
    assert inventory["feature_count"] == 6
    assert inventory["geometry_types"]["Point"] == 3
    assert inventory["geometry_types"]["(none)"] == 1


def test_bucket_inventory():
    doc = {"type": "Feature", "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [2, 0], [2, 2], [0, 0]]]}, "properties": {"Name": "Bed", "area": 3.5}}
    inventory = bucket_inventory(build_buckets(doc))
    assert inventory["bucket_counts"]["label"] == 1
    assert inventory["entry_count"] == 2
    assert inventory["labels"] == ["Bed 4m2"]


def test_check_data_quality():
    warnings = check_data_quality(DOC)
    assert warnings["missing_geometry"] == [5]
    assert warnings["unsupported_geometry"] == [(4, "MultiPoint")]
    reasons = {index: reason for index, _, _, reason in warnings["bad_coords"]}
    assert reasons[2].startswith("Out of valid range")
    assert reasons[3] == "Non-finite coordinate"
    assert warnings["unnamed_labels"] == [1]
    assert has_warnings(warnings)


def test_clean_document_has_no_warnings():
    doc = {"type": "FeatureCollection", "features": [_f({"type": "Point", "coordinates": [5.0, 52.0]})]}
    assert not has_warnings(check_data_quality(doc))
