"""
GeoJSON data sources.

A source produces a parsed GeoJSON document or raises `LoadError`. The
loader does not care whether the data was inline, on disk or fetched.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Protocol

import httpx

from geoverlay.core.config import OverlayConfig
from geoverlay.model import GeoJsonDocument

_USER_AGENT = "geoverlay/1.0.0"
_DEFAULT_TIMEOUT = 30.0


class LoadError(Exception):
    """The GeoJSON source is missing, unreachable or unreadable."""


class DataSource(Protocol):
    def load(self) -> GeoJsonDocument:
        """Return a parsed document or raise LoadError."""
        ...


class StaticSource:
    """A document handed over in memory (the `data` option)."""

    def __init__(self, data: Any):
        self._data = data

    def load(self) -> GeoJsonDocument:
        if self._data is None:
            raise LoadError("No GeoJSON data provided")
        return self._data

    def __repr__(self) -> str:
        return "StaticSource(<inline>)"


class FileSource:
    """A GeoJSON file on local disk."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> GeoJsonDocument:
        if not self._path.exists():
            raise LoadError(f"File not found: {self._path}")
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise LoadError(f"Invalid JSON in {self._path}: {e}")
        except UnicodeDecodeError as e:
            raise LoadError(f"{self._path} is not UTF-8 text: {e}")
        except OSError as e:
            raise LoadError(f"Error reading {self._path}: {e}")

    def __repr__(self) -> str:
        return f"FileSource({str(self._path)!r})"


class UrlSource:
    """A GeoJSON document fetched over HTTP(S)."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._url = url
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    def load(self) -> GeoJsonDocument:
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.get(self._url, headers={"User-Agent": _USER_AGENT})
        except httpx.HTTPError as e:
            raise LoadError(f"Request to {self._url} failed: {e}")

        if not resp.is_success:
            raise LoadError(f"HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as e:
            raise LoadError(f"Invalid JSON from {self._url}: {e}")

    def __repr__(self) -> str:
        return f"UrlSource({self._url!r})"


def source_from_config(config: OverlayConfig) -> DataSource:
    """
    Pick the source for a config: `url` first, then inline `data`.

    http(s) URLs are fetched; any other `url` is read as a local path.
    """
    if config.url:
        if config.url.lower().startswith(("http://", "https://")):
            return UrlSource(config.url)
        return FileSource(config.url)
    if config.data is not None:
        return StaticSource(config.data)
    raise LoadError("No GeoJSON data provided")
