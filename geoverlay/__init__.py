"""geoverlay - GeoJSON map overlay pipeline."""

__version__ = "1.0.0"
__description__ = "Offset, rotate and classify GeoJSON into map overlay layers"

from geoverlay.cli import app, main

__all__ = ["app", "main", "__version__"]
