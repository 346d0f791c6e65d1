"""
In-memory renderer and bucket serialization.

`InMemoryRenderer` implements the Renderer protocol without drawing anything:
it records which layers are mounted, builds marker objects for icon entries
and remembers the current label scaling. The CLI uses it to report what a
real map would show, and tests use it to observe the loader.
"""

from __future__ import annotations

import itertools
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from geoverlay.model import RenderBucket, RenderBuckets, RenderEntry


@dataclass
class InMemoryMarker:
    """RotatableMarker implementation backed by plain attributes."""

    anchor: tuple
    icon_url: Optional[str] = None
    rotation: float = 0
    rotation_origin: str = "center bottom"

    def set_rotation(self, angle: float) -> None:
        self.rotation = angle

    def set_rotation_origin(self, origin: str) -> None:
        self.rotation_origin = origin


@dataclass
class InMemoryLayer:
    handle: int
    bucket: RenderBucket
    entries: List[RenderEntry]
    markers: List[InMemoryMarker] = field(default_factory=list)


class InMemoryRenderer:
    def __init__(self, *, available: bool = True):
        self.available = available
        self.layers: Dict[int, InMemoryLayer] = {}
        self.label_scale: float = 1.0
        self.labels_visible: bool = True
        self._ids = itertools.count(1)

    def is_available(self) -> bool:
        return self.available

    def add_layer(self, bucket: RenderBucket, entries: Sequence[RenderEntry]) -> int:
        handle = next(self._ids)
        layer = InMemoryLayer(handle=handle, bucket=RenderBucket(bucket), entries=list(entries))
        for entry in layer.entries:
            marker_spec = entry.marker
            if marker_spec is None or marker_spec.kind != "icon":
                continue
            coords = (entry.geometry or {}).get("coordinates") or ()
            marker = InMemoryMarker(anchor=tuple(coords[:2]), icon_url=marker_spec.icon_url)
            marker.set_rotation_origin(marker_spec.rotation_origin)
            marker.set_rotation(marker_spec.rotation)
            layer.markers.append(marker)
        self.layers[handle] = layer
        return handle

    def remove_layer(self, handle: Any) -> None:
        if handle not in self.layers:
            raise KeyError(f"Unknown layer handle: {handle!r}")
        del self.layers[handle]

    def scale_labels(self, scale: float, visible: bool) -> None:
        self.label_scale = scale
        self.labels_visible = visible

    def layer_for(self, bucket: RenderBucket) -> Optional[InMemoryLayer]:
        for layer in self.layers.values():
            if layer.bucket == bucket:
                return layer
        return None

    def mounted_buckets(self) -> List[RenderBucket]:
        return [layer.bucket for layer in self.layers.values()]


def write_buckets_json(buckets: RenderBuckets, output_path: str | Path) -> Path:
    """Write the pipeline output as JSON, one array per bucket."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(buckets.to_dict(), f, ensure_ascii=False, indent=2, default=str)
    return output_path


def write_geojson(document: Any, output_path: str | Path) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(document, f, ensure_ascii=False, indent=2)
    return output_path
