"""
Label text, anchors and zoom behaviour.

Two kinds of features produce labels:
- Point features tagged `type_name: label`: "<Name or title> <ceil(area)>m2",
  anchored at the point
- Polygon features with a `Name`: "<Name> <ceil(area)>m2", anchored at the
  centre of the polygon's bounding box

A label with no name at all is not created. A name without a usable area
gives a label with the name only.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from geoverlay.core.classifier import is_named_polygon, is_point_label
from geoverlay.core.transform import iter_positions
from geoverlay.model import FeatureTags, LabelSpec, LonLat

MIN_VISIBLE_ZOOM = 11


def _ceil_area(area: Any) -> Optional[int]:
    if area is None or isinstance(area, bool):
        return None
    try:
        value = float(area)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return math.ceil(value)


def format_label_text(name: Any, area: Any) -> Optional[str]:
    """
    Example:
        >>> format_label_text("Yard", 23.7)
        'Yard 24m2'
        >>> format_label_text("Yard", None)
        'Yard'
        >>> format_label_text(None, 10) is None
        True
    """
    if not name:
        return None
    ceiled = _ceil_area(area)
    if ceiled is None:
        return f"{name}"
    return f"{name} {ceiled}m2"


def bbox_center(geometry: Mapping[str, Any]) -> Optional[LonLat]:
    """Centre of the bounding box of all positions, as (lon, lat)."""
    positions = iter_positions(dict(geometry))
    if not positions:
        return None
    lons = [p[0] for p in positions]
    lats = [p[1] for p in positions]
    return ((min(lons) + max(lons)) / 2, (min(lats) + max(lats)) / 2)


def build_label(feature: Mapping[str, Any]) -> Optional[LabelSpec]:
    """Return the label for a feature, or None when it has none."""
    tags = FeatureTags.from_feature(feature)
    geometry = feature.get("geometry") or {}

    if is_point_label(feature):
        text = format_label_text(tags.name or tags.title, tags.area)
        coords = geometry.get("coordinates")
        if text is None or not coords:
            return None
        return LabelSpec(text=text, anchor=(coords[0], coords[1]))

    if is_named_polygon(feature):
        text = format_label_text(tags.name, tags.area)
        anchor = bbox_center(geometry)
        if text is None or anchor is None:
            return None
        return LabelSpec(text=text, anchor=anchor)

    return None


def label_scale(zoom: float) -> float:
    """Scale factor for label text at a zoom level, clamped to [0.5, 2]."""
    return min(max((zoom - 10) / 5, 0.5), 2)


def label_visible(zoom: float) -> bool:
    return zoom >= MIN_VISIBLE_ZOOM
