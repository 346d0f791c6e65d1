"""
Coordinate transforms over whole GeoJSON documents.

Both transforms walk a document (FeatureCollection, Feature, bare geometry or
a list of features), rebuild every supported geometry with new positions and
leave everything else as it was. Inputs are never mutated.

Supported geometry kinds and how deep their positions are nested:

    Point            0   [lon, lat]
    LineString       1   [[lon, lat], ...]
    Polygon          2   [ring, ...]
    MultiLineString  2   [line, ...]
    MultiPolygon     3   [polygon, ...]

Unknown kinds pass through untouched unless `strict=True`.
"""

from __future__ import annotations

import copy
import math
from typing import Any, Callable, Dict, List, Optional, Sequence

from geoverlay.core.geometry import (
    from_local_xy,
    meters_to_lat_delta,
    meters_to_lon_delta,
    rotate_xy,
    to_local_xy,
)
from geoverlay.model import GeoJsonDocument, Position


PositionFn = Callable[[Position], List[float]]

POSITION_DEPTH: Dict[str, int] = {
    "Point": 0,
    "LineString": 1,
    "Polygon": 2,
    "MultiLineString": 2,
    "MultiPolygon": 3,
}


class MalformedGeometryError(ValueError):
    """Raised in strict mode for geometry kinds the transforms do not handle."""


def _map_positions(coords: Any, depth: int, fn: PositionFn) -> Any:
    if depth == 0:
        return fn(coords)
    return [_map_positions(c, depth - 1, fn) for c in coords]


def map_geometry(
    geometry: Optional[Dict[str, Any]], fn: PositionFn, *, strict: bool = False
) -> Optional[Dict[str, Any]]:
    """Return a copy of `geometry` with `fn` applied to every position."""
    if not geometry:
        return geometry
    kind = geometry.get("type")
    depth = POSITION_DEPTH.get(kind)
    if depth is None:
        if strict:
            raise MalformedGeometryError(f"Unsupported geometry type: {kind!r}")
        return geometry
    return {**geometry, "coordinates": _map_positions(geometry.get("coordinates"), depth, fn)}


def map_document(document: GeoJsonDocument, fn: PositionFn, *, strict: bool = False) -> GeoJsonDocument:
    """Apply `fn` to every position of every geometry in a document."""
    if isinstance(document, list):
        return [map_document(f, fn, strict=strict) for f in document]
    if not isinstance(document, dict):
        return document

    doc_type = document.get("type")
    if doc_type == "FeatureCollection":
        return {
            **document,
            "features": [
                {**f, "geometry": map_geometry(f.get("geometry"), fn, strict=strict)}
                for f in document.get("features") or []
            ],
        }
    if doc_type == "Feature":
        return {**document, "geometry": map_geometry(document.get("geometry"), fn, strict=strict)}
    return map_geometry(document, fn, strict=strict)


def _with_lonlat(position: Position, lon: float, lat: float) -> List[float]:
    return [lon, lat, *position[2:]]


def offset_geojson(
    document: GeoJsonDocument,
    offset_lat_m: float,
    offset_lon_m: float,
    *,
    strict: bool = False,
) -> GeoJsonDocument:
    """
    Shift every position north/south and east/west by a metric distance.

    The latitude delta is the same everywhere. The longitude delta is computed
    per position from that position's own latitude, so points of the same
    feature at different latitudes move by slightly different amounts of
    longitude.

    Args:
        document: GeoJSON document
        offset_lat_m: meters, north positive
        offset_lon_m: meters, east positive
        strict: raise MalformedGeometryError for unknown geometry kinds

    Returns:
        A new document. (0, 0) returns an exact copy.
    """
    if offset_lat_m == 0 and offset_lon_m == 0:
        if strict:
            map_document(document, list, strict=True)
        return copy.deepcopy(document)

    lat_delta = meters_to_lat_delta(offset_lat_m)

    def shift(position: Position) -> List[float]:
        lon, lat = position[0], position[1]
        lon_delta = meters_to_lon_delta(offset_lon_m, lat)
        return _with_lonlat(position, lon + lon_delta, lat + lat_delta)

    return map_document(document, shift, strict=strict)


def rotate_geojson(
    document: GeoJsonDocument,
    rotation_deg: float,
    origin_lat: float = 0.0,
    origin_lon: float = 0.0,
    *,
    strict: bool = False,
) -> GeoJsonDocument:
    """
    Rotate every position about a geographic origin.

    Positions are projected to local meters around the origin, rotated
    counter-clockwise by `rotation_deg` and projected back.

    Returns:
        A new document. 0 degrees returns an exact copy.
    """
    if rotation_deg == 0:
        if strict:
            map_document(document, list, strict=True)
        return copy.deepcopy(document)

    angle = math.radians(rotation_deg)

    def turn(position: Position) -> List[float]:
        x, y = to_local_xy(position[0], position[1], origin_lon, origin_lat)
        xr, yr = rotate_xy(x, y, angle)
        lon, lat = from_local_xy(xr, yr, origin_lon, origin_lat)
        return _with_lonlat(position, lon, lat)

    return map_document(document, turn, strict=strict)


def iter_positions(geometry: Optional[Dict[str, Any]]) -> Sequence[Position]:
    """Flatten the positions of a supported geometry (empty for anything else)."""
    if not geometry:
        return []
    depth = POSITION_DEPTH.get(geometry.get("type"))
    if depth is None:
        return []
    out: List[Position] = []

    def collect(coords: Any, d: int) -> None:
        if d == 0:
            out.append(coords)
            return
        for c in coords or []:
            collect(c, d - 1)

    collect(geometry.get("coordinates"), depth)
    return out
