"""
Feature classification into render buckets.

Bucket membership is a set of independent filters, not a single state:
a labelled polygon with an icon can sit in mainArea, iconPoint and label at
the same time.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Iterator, List, Optional

from geoverlay.model import FeatureTags, GeoJsonDocument, RenderBucket


def geometry_type(feature: Dict[str, Any]) -> Optional[str]:
    geometry = feature.get("geometry")
    if geometry:
        return geometry.get("type")
    return None


def is_point_label(feature: Dict[str, Any]) -> bool:
    return geometry_type(feature) == "Point" and FeatureTags.from_feature(feature).is_label


def is_named_polygon(feature: Dict[str, Any]) -> bool:
    return geometry_type(feature) == "Polygon" and bool(FeatureTags.from_feature(feature).name)


def classify_feature(feature: Dict[str, Any]) -> FrozenSet[RenderBucket]:
    """
    Return every bucket a feature belongs to.

    - type_name "path": pathBase + pathOverlay, never mainArea
    - label points: label only (no placeholder in mainArea)
    - truthy iconImage: iconPoint, whatever the type_name
    - polygons with a Name: label, on top of their other buckets

    Features without a geometry belong nowhere.
    """
    if not feature.get("geometry"):
        return frozenset()

    tags = FeatureTags.from_feature(feature)
    buckets = set()

    if tags.is_path:
        buckets.update((RenderBucket.PATH_BASE, RenderBucket.PATH_OVERLAY))
    elif not is_point_label(feature):
        buckets.add(RenderBucket.MAIN_AREA)

    if tags.has_icon:
        buckets.add(RenderBucket.ICON_POINT)

    if is_point_label(feature) or is_named_polygon(feature):
        buckets.add(RenderBucket.LABEL)

    return frozenset(buckets)


def iter_features(document: GeoJsonDocument) -> Iterator[Dict[str, Any]]:
    """
    Yield Feature dicts from any supported document shape.

    A bare geometry is wrapped in a Feature with empty properties.
    """
    if isinstance(document, list):
        for item in document:
            yield from iter_features(item)
        return
    if not isinstance(document, dict):
        return

    doc_type = document.get("type")
    if doc_type == "FeatureCollection":
        for feature in document.get("features") or []:
            if isinstance(feature, dict):
                yield feature
    elif doc_type == "Feature":
        yield document
    elif doc_type:
        yield {"type": "Feature", "geometry": document, "properties": {}}


def features_in(document: GeoJsonDocument, bucket: RenderBucket) -> List[Dict[str, Any]]:
    return [f for f in iter_features(document) if bucket in classify_feature(f)]
