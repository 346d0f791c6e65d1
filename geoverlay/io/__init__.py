"""GeoJSON sources and renderer adapters."""
