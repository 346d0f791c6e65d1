"""Core functionality modules for geoverlay."""

__all__ = [
    "geometry",
    "transform",
    "classifier",
    "style",
    "labels",
    "pipeline",
    "config",
    "loader",
    "diagnostics",
]
