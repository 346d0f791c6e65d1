"""Render and transform commands for the geoverlay CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from geoverlay import __version__
from geoverlay.core.config import ConfigError, OverlayConfig, load_config
from geoverlay.core.diagnostics import check_data_quality, has_warnings
from geoverlay.core.loader import OverlayLoader
from geoverlay.core.pipeline import transform_document
from geoverlay.core.style import style_summary
from geoverlay.io.renderer import InMemoryRenderer, write_buckets_json, write_geojson
from geoverlay.io.source import LoadError, source_from_config
from geoverlay.model import BUCKET_ORDER, RenderBuckets

console = Console()


def print_header() -> None:
    console.print(
        Panel.fit(
            f"[bold green]GEOVERLAY[/] v{__version__}\n[italic]GeoJSON → map layers[/]",
            border_style="green",
            padding=(0, 4),
        )
    )


def _resolve_config(
    input_source: str,
    config_file: Optional[Path],
    offset_lat: Optional[float],
    offset_lon: Optional[float],
    rotation: Optional[float],
    origin_lat: Optional[float],
    origin_lon: Optional[float],
) -> OverlayConfig:
    """File config first, then command-line overrides."""
    try:
        cfg = load_config(config_file)
        return cfg.merged(
            {
                "url": input_source,
                "offset_lat": offset_lat,
                "offset_lon": offset_lon,
                "rotation_deg": rotation,
                "rotation_origin_lat": origin_lat,
                "rotation_origin_lon": origin_lon,
            }
        )
    except ConfigError as e:
        console.print(f"[bold red]❌ Invalid configuration:[/] {e}")
        raise typer.Exit(1)


def display_buckets(buckets: RenderBuckets, *, max_rows: int = 5) -> None:
    table = Table(show_header=True, header_style="bold cyan", title="Render layers")
    table.add_column("Layer", style="green")
    table.add_column("Features", justify="right")
    table.add_column("Sample", style="dim")

    for bucket in BUCKET_ORDER:
        entries = buckets.get(bucket)
        samples = []
        for entry in entries[:max_rows]:
            if entry.label is not None:
                samples.append(entry.label.text)
            elif entry.marker is not None and entry.marker.kind == "icon":
                samples.append(f"icon {entry.marker.icon_url} @ {entry.marker.rotation}°")
            else:
                samples.append(style_summary(entry.style))
        if len(entries) > max_rows:
            samples.append(f"... and {len(entries) - max_rows} more")
        table.add_row(bucket.value, str(len(entries)), "\n".join(samples))

    console.print(table)


def display_warnings(warnings: dict) -> None:
    console.print("\n[yellow]⚠️  Data quality warnings[/]")
    if warnings["missing_geometry"]:
        console.print(f"  Features without geometry: {len(warnings['missing_geometry'])}")
    for index, kind in warnings["unsupported_geometry"]:
        console.print(f"  Feature {index}: geometry type [cyan]{kind}[/] left untransformed")
    for index, lon, lat, reason in warnings["bad_coords"]:
        console.print(f"  Feature {index}: ({lon}, {lat}) {reason}")
    if warnings["unnamed_labels"]:
        console.print(f"  Label points without Name/title: {len(warnings['unnamed_labels'])}")


def render(
    input_source: str = typer.Argument(..., help="GeoJSON file path or http(s) URL"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
    offset_lat: Optional[float] = typer.Option(None, "--offset-lat", help="Meters north (negative: south)"),
    offset_lon: Optional[float] = typer.Option(None, "--offset-lon", help="Meters east (negative: west)"),
    rotation: Optional[float] = typer.Option(None, "--rotation", "-r", help="Degrees counter-clockwise"),
    origin_lat: Optional[float] = typer.Option(None, "--origin-lat", help="Rotation origin latitude"),
    origin_lon: Optional[float] = typer.Option(None, "--origin-lon", help="Rotation origin longitude"),
    zoom: Optional[float] = typer.Option(None, "--zoom", "-z", help="Report label scaling at this zoom"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write layers as JSON"),
):
    """Run the overlay pipeline and report the resulting layers."""
    print_header()
    cfg = _resolve_config(input_source, config_file, offset_lat, offset_lon, rotation, origin_lat, origin_lon)

    renderer = InMemoryRenderer()
    loader = OverlayLoader(renderer, cfg)
    buckets = loader.render_map()
    if buckets is None:
        console.print(f"[bold red]❌ Could not load GeoJSON from[/] {input_source}")
        raise typer.Exit(1)

    if cfg.has_offset:
        console.print(f"[dim]Offset: {cfg.offset_lat}m north, {cfg.offset_lon}m east[/]")
    if cfg.has_rotation:
        console.print(
            f"[dim]Rotation: {cfg.rotation_deg}° around ({cfg.rotation_origin_lat}, {cfg.rotation_origin_lon})[/]"
        )
    display_buckets(buckets)

    if zoom is not None:
        loader.update_zoom(zoom)
        state = "visible" if renderer.labels_visible else "hidden"
        console.print(f"Labels at zoom {zoom:g}: scale [cyan]{renderer.label_scale:g}[/], {state}")

    try:
        warnings = check_data_quality(transform_document(loader.document, cfg))
    except Exception as e:
        console.print(f"[bold red]❌ Malformed GeoJSON:[/] {escape(repr(e))}")
        loader.destroy()
        raise typer.Exit(1)
    if has_warnings(warnings):
        display_warnings(warnings)

    if output is not None:
        written = write_buckets_json(buckets, output)
        console.print(f"[bold green]✔[/] Layers written to [underline]{written}[/]")

    loader.destroy()


def transform(
    input_source: str = typer.Argument(..., help="GeoJSON file path or http(s) URL"),
    output: Path = typer.Option(..., "--output", "-o", help="Output GeoJSON file"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
    offset_lat: Optional[float] = typer.Option(None, "--offset-lat", help="Meters north (negative: south)"),
    offset_lon: Optional[float] = typer.Option(None, "--offset-lon", help="Meters east (negative: west)"),
    rotation: Optional[float] = typer.Option(None, "--rotation", "-r", help="Degrees counter-clockwise"),
    origin_lat: Optional[float] = typer.Option(None, "--origin-lat", help="Rotation origin latitude"),
    origin_lon: Optional[float] = typer.Option(None, "--origin-lon", help="Rotation origin longitude"),
):
    """Apply offset and rotation and write the resulting GeoJSON."""
    cfg = _resolve_config(input_source, config_file, offset_lat, offset_lon, rotation, origin_lat, origin_lon)
    try:
        document = source_from_config(cfg).load()
    except LoadError as e:
        console.print(f"[bold red]❌ Error:[/] {e}")
        raise typer.Exit(1)

    try:
        transformed = transform_document(document, cfg)
    except Exception as e:
        console.print(f"[bold red]❌ Malformed GeoJSON:[/] {escape(repr(e))}")
        raise typer.Exit(1)

    written = write_geojson(transformed, output)
    console.print(f"[bold green]✔[/] Transformed GeoJSON written to [underline]{written}[/]")
