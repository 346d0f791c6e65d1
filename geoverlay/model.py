"""
Canonical in-memory data model for geoverlay.

GeoJSON documents themselves stay plain dicts/lists (as parsed by `json`).
This module holds the typed views the pipeline derives from them:

- `FeatureTags`: the recognized property keys of a feature, with defaults
- `MarkerSpec` / `LabelSpec`: what the renderer needs to draw points and labels
- `RenderEntry` / `RenderBuckets`: the pipeline output, one list per bucket
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple, Union


GeometryType = Literal["Point", "LineString", "Polygon", "MultiLineString", "MultiPolygon"]

GeoJsonDocument = Union[Dict[str, Any], List[Dict[str, Any]]]
StyleOptions = Dict[str, Any]

Position = Sequence[float]
"""
Position: [lon, lat, *extra]

Extra members (elevation, epoch ms) are never interpreted, only carried along.
"""

LonLat = Tuple[float, float]


class RenderBucket(str, Enum):
    MAIN_AREA = "mainArea"
    PATH_BASE = "pathBase"
    PATH_OVERLAY = "pathOverlay"
    ICON_POINT = "iconPoint"
    LABEL = "label"


# Mount order: areas first, labels on top.
BUCKET_ORDER: Tuple[RenderBucket, ...] = (
    RenderBucket.MAIN_AREA,
    RenderBucket.PATH_BASE,
    RenderBucket.PATH_OVERLAY,
    RenderBucket.ICON_POINT,
    RenderBucket.LABEL,
)


class LifecycleState(str, Enum):
    CREATED = "created"
    RENDERING = "rendering"
    MOUNTED = "mounted"
    DESTROYED = "destroyed"


@dataclass(frozen=True)
class FeatureTags:
    """
    Typed view over the property keys the pipeline understands.

    Unknown keys are ignored here; style keys are read separately by the
    style resolver so that arbitrary per-feature styling keeps working.
    """

    type_name: Optional[str] = None
    icon_image: Any = None
    icon_url: Optional[str] = None
    icon_size: Optional[Sequence[float]] = None
    icon_anchor: Optional[Sequence[float]] = None
    rotation: Any = None
    name: Any = None  # "Name"
    title: Any = None
    area: Any = None
    road_center_color: Optional[str] = None
    dash_array: Optional[str] = None

    @classmethod
    def from_properties(cls, properties: Optional[Mapping[str, Any]]) -> "FeatureTags":
        props = properties or {}
        return cls(
            type_name=props.get("type_name"),
            icon_image=props.get("iconImage"),
            icon_url=props.get("iconUrl"),
            icon_size=props.get("iconSize"),
            icon_anchor=props.get("iconAnchor"),
            rotation=props.get("rotation"),
            name=props.get("Name"),
            title=props.get("title"),
            area=props.get("area"),
            road_center_color=props.get("road_center_color"),
            dash_array=props.get("dashArray"),
        )

    @classmethod
    def from_feature(cls, feature: Optional[Mapping[str, Any]]) -> "FeatureTags":
        return cls.from_properties((feature or {}).get("properties"))

    @property
    def is_label(self) -> bool:
        return self.type_name == "label"

    @property
    def is_path(self) -> bool:
        return self.type_name == "path"

    @property
    def has_icon(self) -> bool:
        return bool(self.icon_image)


@dataclass
class MarkerSpec:
    """
    How a point geometry should be drawn.

    kind="circle" is the invisible placeholder the main layer uses for plain
    points; kind="icon" is a rotated image marker.
    """

    kind: Literal["circle", "icon"]
    radius: Optional[float] = None
    opacity: Optional[float] = None
    icon_url: Optional[str] = None
    icon_size: Optional[List[float]] = None
    icon_anchor: Optional[List[float]] = None
    rotation: float = 0
    rotation_origin: str = "center"
    class_name: Optional[str] = None


@dataclass
class LabelSpec:
    text: str
    anchor: LonLat  # (lon, lat)
    class_name: str = "geojson-text-label"
    text_class_name: str = "geojson-label-text"
    font_size_px: int = 14
    interactive: bool = False


@dataclass
class RenderEntry:
    feature: Dict[str, Any]
    geometry: Optional[Dict[str, Any]]
    style: Optional[StyleOptions] = None
    marker: Optional[MarkerSpec] = None
    label: Optional[LabelSpec] = None


@dataclass
class RenderBuckets:
    """
    Pipeline output: one ordered list of entries per bucket.
    """

    main_area: List[RenderEntry] = field(default_factory=list)
    path_base: List[RenderEntry] = field(default_factory=list)
    path_overlay: List[RenderEntry] = field(default_factory=list)
    icon_point: List[RenderEntry] = field(default_factory=list)
    label: List[RenderEntry] = field(default_factory=list)

    _ATTRS = {
        RenderBucket.MAIN_AREA: "main_area",
        RenderBucket.PATH_BASE: "path_base",
        RenderBucket.PATH_OVERLAY: "path_overlay",
        RenderBucket.ICON_POINT: "icon_point",
        RenderBucket.LABEL: "label",
    }

    def get(self, bucket: RenderBucket) -> List[RenderEntry]:
        return getattr(self, self._ATTRS[RenderBucket(bucket)])

    def add(self, bucket: RenderBucket, entry: RenderEntry) -> None:
        self.get(bucket).append(entry)

    def counts(self) -> Dict[str, int]:
        return {b.value: len(self.get(b)) for b in BUCKET_ORDER}

    def is_empty(self) -> bool:
        return not any(self.get(b) for b in BUCKET_ORDER)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {b.value: [asdict(e) for e in self.get(b)] for b in BUCKET_ORDER}
