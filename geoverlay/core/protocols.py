"""Protocol definitions for the rendering collaborator.

The map widget that actually draws layers lives outside this package. These
protocols are the whole surface the loader relies on.
"""

from typing import Any, Protocol, Sequence

from geoverlay.model import RenderBucket, RenderEntry


class RotatableMarker(Protocol):
    """A marker that can be rotated natively by the renderer."""

    def set_rotation(self, angle: float) -> None:
        """Rotate the marker icon (degrees, clockwise on screen)."""
        ...

    def set_rotation_origin(self, origin: str) -> None:
        """Set the CSS-style transform origin, e.g. "center"."""
        ...


class Renderer(Protocol):
    """Protocol for the map widget adapter."""

    def is_available(self) -> bool:
        """Whether the map container exists and is attached."""
        ...

    def add_layer(self, bucket: RenderBucket, entries: Sequence[RenderEntry]) -> Any:
        """Draw one bucket as a layer; return a handle for removal."""
        ...

    def remove_layer(self, handle: Any) -> None:
        """Remove a layer previously returned by add_layer."""
        ...

    def scale_labels(self, scale: float, visible: bool) -> None:
        """Resize label text and show/hide labels."""
        ...
