"""
Configuration for geoverlay.

Options mirror the overlay's plugin options: where the GeoJSON comes from,
the optional offset/rotation, and style defaults applied to every feature that
does not carry its own value. They can be given inline (a mapping) or in a
YAML file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from geoverlay.core.style import STYLE_ATTRIBUTES


CONFIG_FILENAMES = ("geoverlay.yaml", "geoverlay.yml")

_NUMERIC_OPTIONS = (
    "offset_lat",
    "offset_lon",
    "rotation_deg",
    "rotation_origin_lat",
    "rotation_origin_lon",
)


class ConfigError(ValueError):
    """Invalid configuration file or option value."""


def _as_float(key: str, value: Any) -> float:
    # `offset_lat: null` and friends fall back to 0 like a missing key.
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        raise ConfigError(f"Option '{key}' must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Option '{key}' must be a number, got {value!r}")


@dataclass
class OverlayConfig:
    """Resolved overlay options."""

    url: Optional[str] = None
    data: Any = None
    offset_lat: float = 0.0
    offset_lon: float = 0.0
    rotation_deg: float = 0.0
    rotation_origin_lat: float = 0.0
    rotation_origin_lon: float = 0.0
    style: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "OverlayConfig":
        """
        Build a config from a flat options mapping.

        Format (all keys optional):
            url: https://example.com/site.geojson
            offset_lat: 12.5        # meters, north positive
            offset_lon: -3          # meters, east positive
            rotation_deg: 15        # counter-clockwise
            rotation_origin_lat: 52.1
            rotation_origin_lon: 5.3
            color: "#3388ff"        # any style attribute, used as default
        """
        options = dict(options or {})
        numbers = {key: _as_float(key, options.get(key)) for key in _NUMERIC_OPTIONS}
        style = {key: options[key] for key in STYLE_ATTRIBUTES if key in options}
        url = options.get("url")
        return cls(
            url=str(url) if url else None,
            data=options.get("data"),
            style=style,
            **numbers,
        )

    def merged(self, overrides: Mapping[str, Any]) -> "OverlayConfig":
        """Return a new config with non-None `overrides` applied on top."""
        options = self.to_mapping()
        options.update({k: v for k, v in overrides.items() if v is not None})
        return OverlayConfig.from_mapping(options)

    def to_mapping(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "url": self.url,
            "data": self.data,
            "offset_lat": self.offset_lat,
            "offset_lon": self.offset_lon,
            "rotation_deg": self.rotation_deg,
            "rotation_origin_lat": self.rotation_origin_lat,
            "rotation_origin_lon": self.rotation_origin_lon,
        }
        options.update(self.style)
        return options

    @property
    def has_offset(self) -> bool:
        return self.offset_lat != 0 or self.offset_lon != 0

    @property
    def has_rotation(self) -> bool:
        return self.rotation_deg != 0

    def get_config_summary(self) -> Dict[str, Any]:
        if self.url:
            source = self.url
        elif self.data is not None:
            source = "(inline data)"
        else:
            source = None
        return {
            "source": source,
            "offset_lat": self.offset_lat,
            "offset_lon": self.offset_lon,
            "rotation_deg": self.rotation_deg,
            "rotation_origin": (self.rotation_origin_lat, self.rotation_origin_lon),
            "style_defaults": dict(self.style),
        }

    def export_template(self, output_path: Path) -> None:
        """
        Write a commented YAML template for user customization.
        """
        yaml_content = """# =============================================================================
# geoverlay configuration
# =============================================================================
# Where the GeoJSON comes from. `url` may be http(s) or a local file path.
# url: https://example.com/garden.geojson

# Shift the whole dataset (meters). North and east are positive.
offset_lat: 0
offset_lon: 0

# Rotate the whole dataset (degrees, counter-clockwise) about an origin.
rotation_deg: 0
rotation_origin_lat: 0
rotation_origin_lon: 0

# =============================================================================
# STYLE DEFAULTS
# =============================================================================
# Used for any feature that does not set the attribute in its properties.
# Supported: color, weight, opacity, fillColor, fillOpacity, dashArray,
#            lineCap, lineJoin, radius
#
# color: "#3388ff"
# weight: 3
# opacity: 1.0
# fillColor: "#3388ff"
# fillOpacity: 0.2
"""
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(yaml_content)


def read_config_file(config_file: Path) -> Dict[str, Any]:
    """Parse a YAML config file into an options mapping."""
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")
    except OSError as e:
        raise ConfigError(f"Error loading config file: {e}")

    # Handle empty config file
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("Config file must contain a mapping of options")
    return raw


def load_config(config_file: Optional[Path] = None) -> OverlayConfig:
    """
    Load overlay configuration.

    Args:
        config_file: Optional path to a YAML file. If None, looks for
                     'geoverlay.yaml' / 'geoverlay.yml' in the current directory.

    Returns:
        OverlayConfig instance (all defaults when no file is found)
    """
    if config_file is None:
        for name in CONFIG_FILENAMES:
            candidate = Path(name)
            if candidate.exists():
                config_file = candidate
                break

    if config_file is None:
        return OverlayConfig()

    config_file = Path(config_file)
    if not config_file.exists():
        raise ConfigError(f"Config file not found: {config_file}")
    return OverlayConfig.from_mapping(read_config_file(config_file))
