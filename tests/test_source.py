"""Tests for GeoJSON data sources."""

import json
from pathlib import Path

import httpx
import pytest

from geoverlay.core.config import OverlayConfig
from geoverlay.io.source import (
    FileSource,
    LoadError,
    StaticSource,
    UrlSource,
    source_from_config,
)

FC = {"type": "FeatureCollection", "features": []}


def _transport(status=200, body=None, text=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if text is not None:
            return httpx.Response(status, text=text)
        return httpx.Response(status, json=body if body is not None else FC)

    return httpx.MockTransport(handler)


class TestUrlSource:
    def test_loads_json(self):
        assert UrlSource("https://example.com/a.geojson", transport=_transport()).load() == FC

    def test_http_error_status(self):
        with pytest.raises(LoadError, match="HTTP 404"):
            UrlSource("https://example.com/missing", transport=_transport(status=404)).load()

    def test_invalid_json(self):
        with pytest.raises(LoadError, match="Invalid JSON"):
            UrlSource("https://example.com/a", transport=_transport(text="<html>")).load()

    def test_network_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(LoadError, match="failed"):
            UrlSource("https://example.com/a", transport=httpx.MockTransport(handler)).load()


class TestFileSource:
    def test_loads_file(self, tmp_path: Path):
        path = tmp_path / "site.geojson"
        path.write_text(json.dumps(FC), encoding="utf-8")
        assert FileSource(path).load() == FC

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(LoadError, match="File not found"):
            FileSource(tmp_path / "nope.geojson").load()

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "bad.geojson"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(LoadError, match="Invalid JSON"):
            FileSource(path).load()

    def test_not_utf8(self, tmp_path: Path):
        path = tmp_path / "latin1.geojson"
        path.write_bytes(b'{"type": "FeatureCollection", "name": "\xff\xfe", "features": []}')
        with pytest.raises(LoadError, match="not UTF-8"):
            FileSource(path).load()


class TestStaticSource:
    def test_returns_data(self):
        assert StaticSource(FC).load() is FC

    def test_empty_containers_are_data(self):
        assert StaticSource({}).load() == {}
        assert StaticSource([]).load() == []

    def test_empty_data(self):
        with pytest.raises(LoadError, match="No GeoJSON data provided"):
            StaticSource(None).load()


class TestSourceFromConfig:
    def test_http_url(self):
        source = source_from_config(OverlayConfig(url="https://example.com/a.geojson"))
        assert isinstance(source, UrlSource)
        assert source.url == "https://example.com/a.geojson"

    def test_path_url(self, tmp_path: Path):
        source = source_from_config(OverlayConfig(url=str(tmp_path / "a.geojson")))
        assert isinstance(source, FileSource)

    def test_url_wins_over_data(self):
        source = source_from_config(OverlayConfig(url="http://x/a.json", data=FC))
        assert isinstance(source, UrlSource)

    def test_inline_data(self):
        assert isinstance(source_from_config(OverlayConfig(data=FC)), StaticSource)

    def test_empty_inline_data_is_used(self):
        source = source_from_config(OverlayConfig(data=[]))
        assert isinstance(source, StaticSource)
        assert source.load() == []

    def test_nothing_configured(self):
        with pytest.raises(LoadError, match="No GeoJSON data provided"):
            source_from_config(OverlayConfig())
