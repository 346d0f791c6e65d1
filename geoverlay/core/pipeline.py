"""
The render pipeline: transform, then classify and style.

    document --offset--> --rotate--> --classify/style--> RenderBuckets

Every stage is a pure function of its input, so a render pass can be
dropped between any two stages without leaving anything half-updated.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from geoverlay.core.classifier import classify_feature, geometry_type, iter_features
from geoverlay.core.config import OverlayConfig
from geoverlay.core.labels import build_label
from geoverlay.core.style import (
    hidden_point_marker,
    resolve_style,
    road_overlay_style,
    rotated_icon_marker,
)
from geoverlay.core.transform import offset_geojson, rotate_geojson
from geoverlay.model import GeoJsonDocument, RenderBucket, RenderBuckets, RenderEntry

logger = logging.getLogger(__name__)


def transform_document(document: GeoJsonDocument, config: OverlayConfig) -> GeoJsonDocument:
    """Apply the configured offset, then the configured rotation."""
    if config.has_offset:
        document = offset_geojson(document, config.offset_lat, config.offset_lon)
        logger.debug(
            "Applied offset: %sm north/south, %sm east/west",
            config.offset_lat,
            config.offset_lon,
        )

    if config.has_rotation:
        document = rotate_geojson(
            document,
            config.rotation_deg,
            config.rotation_origin_lat,
            config.rotation_origin_lon,
        )
        logger.debug(
            "Applied rotation: %s° around (%s, %s)",
            config.rotation_deg,
            config.rotation_origin_lat,
            config.rotation_origin_lon,
        )

    return document


def build_buckets(
    document: GeoJsonDocument, style_defaults: Optional[Mapping[str, Any]] = None
) -> RenderBuckets:
    """
    Classify and style every feature of an (already transformed) document.

    Entries keep document order within each bucket.
    """
    buckets = RenderBuckets()
    for feature in iter_features(document):
        membership = classify_feature(feature)
        if not membership:
            continue
        geometry = feature.get("geometry")
        is_point = geometry_type(feature) == "Point"

        if RenderBucket.MAIN_AREA in membership:
            buckets.add(
                RenderBucket.MAIN_AREA,
                RenderEntry(
                    feature=feature,
                    geometry=geometry,
                    style=resolve_style(feature, style_defaults),
                    marker=hidden_point_marker() if is_point else None,
                ),
            )

        if RenderBucket.PATH_BASE in membership:
            buckets.add(
                RenderBucket.PATH_BASE,
                RenderEntry(feature=feature, geometry=geometry, style=resolve_style(feature, style_defaults)),
            )
            buckets.add(
                RenderBucket.PATH_OVERLAY,
                RenderEntry(feature=feature, geometry=geometry, style=road_overlay_style(feature)),
            )

        if RenderBucket.ICON_POINT in membership:
            if is_point:
                entry = RenderEntry(feature=feature, geometry=geometry, marker=rotated_icon_marker(feature))
            else:
                entry = RenderEntry(feature=feature, geometry=geometry, style=resolve_style(feature, style_defaults))
            buckets.add(RenderBucket.ICON_POINT, entry)

        if RenderBucket.LABEL in membership:
            label = build_label(feature)
            if label is not None:
                buckets.add(RenderBucket.LABEL, RenderEntry(feature=feature, geometry=geometry, label=label))

    return buckets


def run_pipeline(document: GeoJsonDocument, config: Optional[OverlayConfig] = None) -> RenderBuckets:
    """
    Transform, classify and style a document.

    Never raises: on any failure the error is logged and empty buckets are
    returned, so a broken dataset only costs its own overlay.
    """
    config = config or OverlayConfig()
    try:
        transformed = transform_document(document, config)
        return build_buckets(transformed, config.style)
    except Exception:
        logger.exception("Render pipeline failed; no layers produced")
        return RenderBuckets()
