#!/usr/bin/env python3
"""
geoverlay - GeoJSON map overlay pipeline
Main CLI entry point
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from geoverlay.commands import config_cmd, render_cmd

app = typer.Typer(
    name="geoverlay",
    help="Offset, rotate and classify GeoJSON into map overlay layers",
    no_args_is_help=True,
    add_completion=True,
)

app.command(name="render", help="Run the overlay pipeline and report the layers")(render_cmd.render)
app.command(name="transform", help="Write the offset/rotated GeoJSON")(render_cmd.transform)

app.add_typer(config_cmd.app, name="config", help="Manage configuration settings")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    geoverlay - GeoJSON map overlay pipeline

    Workflow:
      render     - Load GeoJSON, apply offset/rotation, build the render layers
      transform  - Write the offset/rotated GeoJSON only

    Utilities:
      config     - Manage configuration settings
    """
    configure_logging(verbose)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
