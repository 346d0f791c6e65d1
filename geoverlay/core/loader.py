"""
Overlay loader: ties a data source, the pipeline and a renderer together.

Lifecycle:

    CREATED --render_map--> RENDERING --mounted--> MOUNTED
       ^                        |                     |
       +------ load failed -----+                     |
    any state --destroy--> DESTROYED  <---------------+

`render_map` may be called again from MOUNTED; the previous layers are
replaced. Once DESTROYED, every entry point is a logged no-op.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from geoverlay.core.config import OverlayConfig
from geoverlay.core.labels import label_scale, label_visible
from geoverlay.core.pipeline import run_pipeline
from geoverlay.core.protocols import Renderer
from geoverlay.io.source import DataSource, LoadError, source_from_config
from geoverlay.model import BUCKET_ORDER, GeoJsonDocument, LifecycleState, RenderBuckets

logger = logging.getLogger(__name__)


class LifecycleError(RuntimeError):
    """Illegal lifecycle transition."""


_TRANSITIONS: Dict[LifecycleState, frozenset] = {
    LifecycleState.CREATED: frozenset({LifecycleState.RENDERING, LifecycleState.DESTROYED}),
    LifecycleState.RENDERING: frozenset(
        {LifecycleState.MOUNTED, LifecycleState.CREATED, LifecycleState.DESTROYED}
    ),
    LifecycleState.MOUNTED: frozenset({LifecycleState.RENDERING, LifecycleState.DESTROYED}),
    LifecycleState.DESTROYED: frozenset(),
}


class OverlayLoader:
    """Loads a GeoJSON document and mounts its render buckets on a renderer."""

    def __init__(
        self,
        renderer: Renderer,
        config: Optional[OverlayConfig] = None,
        source: Optional[DataSource] = None,
    ):
        self.renderer = renderer
        self.config = config or OverlayConfig()
        self._source = source
        self._state = LifecycleState.CREATED
        self._handles: List[Any] = []
        self.document: Optional[GeoJsonDocument] = None  # as loaded, before transforms
        self.buckets: Optional[RenderBuckets] = None

    @property
    def state(self) -> LifecycleState:
        return self._state

    def _transition(self, target: LifecycleState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise LifecycleError(f"Cannot go from {self._state.value} to {target.value}")
        self._state = target

    def _load(self) -> Optional[GeoJsonDocument]:
        try:
            source = self._source or source_from_config(self.config)
            return source.load()
        except LoadError as e:
            logger.error("Load error: %s", e)
            return None
        except Exception:
            logger.exception("Unexpected error loading GeoJSON")
            return None

    def render_map(self) -> Optional[RenderBuckets]:
        """
        Load, transform, classify and mount the overlay.

        Returns:
            The mounted buckets, or None when nothing was mounted (renderer
            unavailable, load failure, or destroyed while loading).
        """
        if self._state not in (LifecycleState.CREATED, LifecycleState.MOUNTED):
            logger.warning("render_map ignored in state %s", self._state.value)
            return None

        logger.debug("Initializing overlay")
        if not self.renderer.is_available():
            logger.warning("Map container not available")
            return None

        self._transition(LifecycleState.RENDERING)
        self._remove_layers()

        document = self._load()
        if self._state is LifecycleState.DESTROYED:
            return None
        if document is None:
            self._transition(LifecycleState.CREATED)
            return None

        self.document = document
        buckets = run_pipeline(document, self.config)

        if self._state is LifecycleState.DESTROYED or not self.renderer.is_available():
            if self._state is LifecycleState.RENDERING:
                self._transition(LifecycleState.CREATED)
            return None

        try:
            for bucket in BUCKET_ORDER:
                self._handles.append(self.renderer.add_layer(bucket, buckets.get(bucket)))
        except Exception:
            logger.exception("Failed to add layers")
            self._remove_layers()
            if self._state is LifecycleState.RENDERING:
                self._transition(LifecycleState.CREATED)
            return None
        logger.debug("Layers added: %s", buckets.counts())

        self.buckets = buckets
        self._transition(LifecycleState.MOUNTED)
        return buckets

    def update_zoom(self, zoom: float) -> None:
        """Rescale and fade labels for a new zoom level."""
        if self._state is not LifecycleState.MOUNTED:
            return
        self.renderer.scale_labels(label_scale(zoom), label_visible(zoom))

    def _remove_layers(self) -> None:
        for handle in self._handles:
            try:
                self.renderer.remove_layer(handle)
            except Exception as e:
                logger.debug("Cleanup error: %s", e)
        self._handles = []

    def destroy(self) -> None:
        """Remove all layers; the loader cannot be used afterwards."""
        if self._state is LifecycleState.DESTROYED:
            return
        self._transition(LifecycleState.DESTROYED)
        self._remove_layers()
        self.document = None
        self.buckets = None
