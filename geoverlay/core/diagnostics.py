"""
Diagnostics helpers.

Quick inventories of a document and of the pipeline output, plus data
quality warnings that explain why a feature may be missing or misplaced on
the map.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Any, Dict

from geoverlay.core.classifier import geometry_type, iter_features
from geoverlay.core.labels import build_label
from geoverlay.core.transform import POSITION_DEPTH, iter_positions
from geoverlay.model import FeatureTags, GeoJsonDocument, RenderBuckets


def document_inventory(document: GeoJsonDocument) -> Dict[str, Any]:
    kinds = Counter(geometry_type(f) or "(none)" for f in iter_features(document))
    return {
        "feature_count": sum(kinds.values()),
        "geometry_types": dict(kinds),
    }


def bucket_inventory(buckets: RenderBuckets) -> Dict[str, Any]:
    counts = buckets.counts()
    return {
        "bucket_counts": counts,
        "entry_count": sum(counts.values()),
        "labels": [e.label.text for e in buckets.label if e.label is not None],
    }


def check_data_quality(document: GeoJsonDocument) -> Dict[str, Any]:
    """
    Check data quality and return warnings.

    Returns a dict with:
    - missing_geometry: list of feature indexes without a geometry
    - unsupported_geometry: list of (index, type) passed through untransformed
    - bad_coords: list of (index, lon, lat, reason)
    - unnamed_labels: list of label feature indexes that produce no label
    """
    warnings: Dict[str, Any] = {
        "missing_geometry": [],
        "unsupported_geometry": [],
        "bad_coords": [],
        "unnamed_labels": [],
    }

    for index, feature in enumerate(iter_features(document)):
        geometry = feature.get("geometry")
        if not geometry:
            warnings["missing_geometry"].append(index)
            continue

        kind = geometry.get("type")
        if kind not in POSITION_DEPTH:
            warnings["unsupported_geometry"].append((index, kind))
            continue

        for position in iter_positions(geometry):
            try:
                lon, lat = float(position[0]), float(position[1])
            except (TypeError, ValueError, IndexError):
                warnings["bad_coords"].append((index, None, None, "Malformed position"))
                break
            if not (math.isfinite(lon) and math.isfinite(lat)):
                warnings["bad_coords"].append((index, lon, lat, "Non-finite coordinate"))
                break
            if not (-90 <= lat <= 90) or not (-180 <= lon <= 180):
                warnings["bad_coords"].append(
                    (index, lon, lat, "Out of valid range (-90..90, -180..180)")
                )
                break

        tags = FeatureTags.from_feature(feature)
        if tags.is_label and kind == "Point" and build_label(feature) is None:
            warnings["unnamed_labels"].append(index)

    return warnings


def has_warnings(warnings: Dict[str, Any]) -> bool:
    return any(warnings.values())
