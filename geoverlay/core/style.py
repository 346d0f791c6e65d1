"""
Style resolution for rendered features.

Feature properties win over configured defaults; defaults win over nothing.
Attributes that resolve to nothing are left out of the style dict entirely.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from geoverlay.core.classifier import geometry_type
from geoverlay.model import FeatureTags, MarkerSpec, StyleOptions


STYLE_ATTRIBUTES: tuple[str, ...] = (
    "color",
    "weight",
    "opacity",
    "fillColor",
    "fillOpacity",
    "dashArray",
    "lineCap",
    "lineJoin",
    "radius",
)

ROAD_CENTER_COLOR = "#000000"
ROAD_CENTER_WEIGHT = 2
ROAD_CENTER_OPACITY = 1.0
ROAD_CENTER_DASH = "8, 8"

DEFAULT_ICON_SIZE: List[float] = [30, 30]
ROTATED_ICON_CLASS = "leaflet-rotated-icon"


def resolve_style(
    feature: Mapping[str, Any], defaults: Optional[Mapping[str, Any]] = None
) -> Optional[StyleOptions]:
    """
    Compute the style dict for a feature.

    For each attribute in STYLE_ATTRIBUTES:
      1. the feature property, if truthy
      2. else the default, if one is configured (even a falsy one such as 0)
      3. else the attribute is omitted

    Returns:
        The style dict, or None for a Point carrying `iconImage` (those are
        drawn by the icon layer only and get no generic styling).

    Example:
        >>> resolve_style({"properties": {"color": "red"}}, {"color": "blue", "weight": 3})
        {'color': 'red', 'weight': 3}
    """
    properties = feature.get("properties") or {}
    if geometry_type(feature) == "Point" and FeatureTags.from_properties(properties).has_icon:
        return None

    defaults = defaults or {}
    style: StyleOptions = {}
    for attr in STYLE_ATTRIBUTES:
        value = properties.get(attr) or defaults.get(attr)
        if value is not None:
            style[attr] = value
    return style


def road_overlay_style(feature: Mapping[str, Any]) -> StyleOptions:
    """Fixed centre-line style for path features; defaults do not apply."""
    tags = FeatureTags.from_feature(feature)
    return {
        "color": tags.road_center_color or ROAD_CENTER_COLOR,
        "weight": ROAD_CENTER_WEIGHT,
        "opacity": ROAD_CENTER_OPACITY,
        "dashArray": tags.dash_array or ROAD_CENTER_DASH,
    }


def hidden_point_marker() -> MarkerSpec:
    """Placeholder for plain points in the main layer: present but invisible."""
    return MarkerSpec(kind="circle", radius=0, opacity=0)


def rotated_icon_marker(feature: Mapping[str, Any]) -> MarkerSpec:
    """
    Build the icon marker for a point feature with `iconImage`.

    iconUrl overrides iconImage; iconSize defaults to 30x30 and iconAnchor to
    the centre of the icon; rotation (degrees) defaults to 0.
    """
    tags = FeatureTags.from_feature(feature)
    icon_size = list(tags.icon_size or DEFAULT_ICON_SIZE)
    icon_anchor = list(tags.icon_anchor or [icon_size[0] / 2, icon_size[1] / 2])
    return MarkerSpec(
        kind="icon",
        icon_url=tags.icon_url or f"{tags.icon_image}",
        icon_size=icon_size,
        icon_anchor=icon_anchor,
        rotation=tags.rotation or 0,
        rotation_origin="center",
        class_name=ROTATED_ICON_CLASS,
    )


def style_summary(style: Optional[Dict[str, Any]]) -> str:
    """Short human-readable form used by the CLI tables."""
    if style is None:
        return "(icon only)"
    if not style:
        return "(default)"
    return ", ".join(f"{k}={v}" for k, v in style.items())
