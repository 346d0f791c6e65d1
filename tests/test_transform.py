"""Tests for offset/rotation transforms over GeoJSON documents."""

import copy
import math

import pytest

from geoverlay.core.geometry import to_local_xy
from geoverlay.core.transform import (
    MalformedGeometryError,
    iter_positions,
    offset_geojson,
    rotate_geojson,
)


def _feature(geometry, **props):
    return {"type": "Feature", "geometry": geometry, "properties": props}


GEOMETRIES = {
    "Point": {"type": "Point", "coordinates": [10.0, 50.0]},
    "LineString": {"type": "LineString", "coordinates": [[10.0, 50.0], [10.001, 50.002]]},
    "Polygon": {
        "type": "Polygon",
        "coordinates": [
            [[10.0, 50.0], [10.01, 50.0], [10.01, 50.01], [10.0, 50.0]],
            [[10.002, 50.002], [10.003, 50.002], [10.003, 50.003], [10.002, 50.002]],
        ],
    },
    "MultiLineString": {
        "type": "MultiLineString",
        "coordinates": [[[10.0, 50.0], [10.1, 50.1]], [[11.0, 51.0], [11.1, 51.1], [11.2, 51.2]]],
    },
    "MultiPolygon": {
        "type": "MultiPolygon",
        "coordinates": [
            [[[10.0, 50.0], [10.01, 50.0], [10.01, 50.01], [10.0, 50.0]]],
            [[[12.0, 52.0], [12.01, 52.0], [12.01, 52.01], [12.0, 52.0]]],
        ],
    },
}


def _collection():
    return {
        "type": "FeatureCollection",
        "name": "site",
        "features": [_feature(copy.deepcopy(g), kind=k) for k, g in GEOMETRIES.items()],
    }


def _shape(coords):
    """Nesting structure with the numbers stripped out."""
    if coords and isinstance(coords[0], (int, float)):
        return len(coords)
    return [_shape(c) for c in coords]


def _assert_close(a, b, tol=1e-9):
    if a and isinstance(a[0], (int, float)):
        assert a == pytest.approx(b, abs=tol)
        return
    assert len(a) == len(b)
    for x, y in zip(a, b):
        _assert_close(x, y, tol)


class TestOffset:
    def test_one_degree_north(self):
        doc = _feature({"type": "Point", "coordinates": [10, 50]})
        out = offset_geojson(doc, 111320, 0)
        assert out["geometry"]["coordinates"] == pytest.approx([10, 51.0])

    def test_small_offset_north(self):
        doc = _feature({"type": "Point", "coordinates": [10, 50]})
        out = offset_geojson(doc, 111.32, 0)
        lon, lat = out["geometry"]["coordinates"]
        assert lon == 10
        assert lat == pytest.approx(50.001)

    def test_east_offset_uses_each_points_latitude(self):
        doc = _feature({"type": "LineString", "coordinates": [[0.0, 0.0], [0.0, 60.0]]})
        out = offset_geojson(doc, 0, 111320)
        (lon0, lat0), (lon1, lat1) = out["geometry"]["coordinates"]
        assert lon0 == pytest.approx(1.0)
        assert lon1 == pytest.approx(2.0)
        assert (lat0, lat1) == (0.0, 60.0)

    def test_zero_offset_is_identity_and_copy(self):
        doc = _collection()
        out = offset_geojson(doc, 0, 0)
        assert out == doc
        assert out is not doc
        assert out["features"][0]["geometry"] is not doc["features"][0]["geometry"]

    @pytest.mark.parametrize("kind", list(GEOMETRIES))
    def test_structure_preserved(self, kind):
        geometry = copy.deepcopy(GEOMETRIES[kind])
        out = offset_geojson(geometry, 25, -40)
        assert out["type"] == kind
        assert _shape(out["coordinates"]) == _shape(geometry["coordinates"])

    def test_input_not_mutated(self):
        doc = _collection()
        snapshot = copy.deepcopy(doc)
        offset_geojson(doc, 10, 10)
        assert doc == snapshot

    def test_other_members_kept(self):
        doc = _collection()
        out = offset_geojson(doc, 10, 10)
        assert out["name"] == "site"
        assert [f["properties"] for f in out["features"]] == [f["properties"] for f in doc["features"]]

    def test_extra_position_members_carried(self):
        doc = {"type": "LineString", "coordinates": [[10.0, 50.0, 1200.5, 1700000000000]]}
        out = offset_geojson(doc, 100, 0)
        assert out["coordinates"][0][2:] == [1200.5, 1700000000000]

    def test_unknown_geometry_passes_through(self):
        point = {"type": "MultiPoint", "coordinates": [[1.0, 2.0]]}
        out = offset_geojson(_feature(point), 100, 100)
        assert out["geometry"] == point

    def test_unknown_geometry_strict_raises(self):
        doc = _feature({"type": "Circle", "coordinates": [1.0, 2.0], "radius": 4})
        with pytest.raises(MalformedGeometryError):
            offset_geojson(doc, 100, 100, strict=True)

    def test_null_geometry_kept(self):
        out = offset_geojson(_feature(None, Name="Folder"), 10, 10)
        assert out["geometry"] is None

    def test_list_of_features(self):
        docs = [_feature({"type": "Point", "coordinates": [0.0, 0.0]})]
        out = offset_geojson(docs, 111320, 0)
        assert out[0]["geometry"]["coordinates"] == pytest.approx([0.0, 1.0])

    def test_pole_latitude_does_not_raise(self):
        out = offset_geojson({"type": "Point", "coordinates": [0.0, 90.0]}, 0, 10)
        lon, lat = out["coordinates"]
        assert lat == 90.0
        assert math.isfinite(lon)
        assert abs(lon) > 1e6


class TestRotation:
    def test_zero_rotation_is_identity(self):
        doc = _collection()
        out = rotate_geojson(doc, 0, 50.0, 10.0)
        assert out == doc
        assert out is not doc

    def test_quarter_turn_direction(self):
        # A point due east of the origin ends up due north of it.
        origin_lon, origin_lat = 10.0, 50.0
        doc = {"type": "Point", "coordinates": [10.001, 50.0]}
        out = rotate_geojson(doc, 90, origin_lat, origin_lon)
        x0, y0 = to_local_xy(10.001, 50.0, origin_lon, origin_lat)
        x1, y1 = to_local_xy(*out["coordinates"], origin_lon, origin_lat)
        assert x1 == pytest.approx(0.0, abs=1e-6)
        assert y1 == pytest.approx(x0)
        assert y0 == 0.0

    def test_origin_is_fixed_point(self):
        out = rotate_geojson({"type": "Point", "coordinates": [0.0, 0.0]}, 90)
        assert out["coordinates"] == pytest.approx([0.0, 0.0])

    @pytest.mark.parametrize("angle", [15, 90, -37.5, 180, 359])
    def test_inverse_rotation_restores(self, angle):
        doc = _collection()
        there = rotate_geojson(doc, angle, 50.005, 10.005)
        back = rotate_geojson(there, -angle, 50.005, 10.005)
        for original, restored in zip(doc["features"], back["features"]):
            _assert_close(restored["geometry"]["coordinates"], original["geometry"]["coordinates"])

    @pytest.mark.parametrize("kind", list(GEOMETRIES))
    def test_structure_preserved(self, kind):
        geometry = copy.deepcopy(GEOMETRIES[kind])
        out = rotate_geojson(geometry, 33, 50, 10)
        assert _shape(out["coordinates"]) == _shape(geometry["coordinates"])

    def test_input_not_mutated(self):
        doc = _collection()
        snapshot = copy.deepcopy(doc)
        rotate_geojson(doc, 45, 50, 10)
        assert doc == snapshot

    def test_unknown_geometry_passes_through(self):
        collection = {"type": "GeometryCollection", "geometries": []}
        assert rotate_geojson(collection, 45) == collection


def test_iter_positions_flattens_polygon_rings():
    positions = iter_positions(GEOMETRIES["Polygon"])
    assert len(positions) == 8
    assert iter_positions({"type": "Unknown"}) == []
    assert iter_positions(None) == []
