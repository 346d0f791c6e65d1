"""Config command for the geoverlay CLI."""

from pathlib import Path

import typer
from rich.console import Console

from geoverlay.core.config import ConfigError, OverlayConfig, load_config

app = typer.Typer()
console = Console()


@app.command("show")
def show():
    """Show current configuration."""
    try:
        cfg = load_config()
    except ConfigError as e:
        console.print(f"[bold red]❌ Invalid configuration:[/] {e}")
        raise typer.Exit(1)
    summary = cfg.get_config_summary()

    console.print("\n[bold]Current Configuration:[/]")
    console.print(f"  Source: [cyan]{summary['source'] or '(none)'}[/]")
    console.print(f"  Offset: [cyan]{summary['offset_lat']}m north, {summary['offset_lon']}m east[/]")
    origin_lat, origin_lon = summary["rotation_origin"]
    console.print(f"  Rotation: [cyan]{summary['rotation_deg']}° around ({origin_lat}, {origin_lon})[/]")

    console.print("\n[bold]Style defaults:[/]")
    if not summary["style_defaults"]:
        console.print("  [dim](none)[/]")
    for key, value in summary["style_defaults"].items():
        console.print(f"  {key}: [cyan]{value}[/]")
    console.print()


@app.command("export")
def export(
    output_path: Path = typer.Option(Path("geoverlay.yaml"), "--output", "-o", help="Template path"),
):
    """Export configuration template."""
    if output_path.exists():
        console.print(f"[bold red]❌ Error:[/] {output_path} already exists")
        raise typer.Exit(1)
    OverlayConfig().export_template(output_path)
    console.print(f"[bold green]✔[/] Configuration template exported to [underline]{output_path}[/]")
    console.print("[dim]Edit this file to set offsets, rotation and style defaults[/]")


@app.command("validate")
def validate(config_file: Path = typer.Argument(..., help="Config file to validate")):
    """Validate a configuration file."""
    try:
        cfg = load_config(config_file)
    except ConfigError as e:
        console.print(f"[bold red]❌ Invalid configuration:[/] {e}")
        raise typer.Exit(1)
    console.print(f"[bold green]✔[/] Configuration file is valid: [underline]{config_file}[/]")
    summary = cfg.get_config_summary()
    console.print(f"  Style defaults: {len(summary['style_defaults'])}")
