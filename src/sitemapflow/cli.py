"""Command line interface: ``sitemapflow INPUT [-o OUTPUT] [--png PREVIEW]``."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .converter import DEFAULT_OUTPUT, EmptyGraphError, SitemapConverter
from .layout import NetworkXLayout

app = typer.Typer(
    add_completion=False,
    help="Convert Mermaid flowcharts/sitemaps to draw.io XML.",
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("sitemapflow")
    package_logger.handlers.clear()
    package_logger.addHandler(
        RichHandler(console=console, show_path=False, show_time=False)
    )
    package_logger.setLevel(logging.INFO if verbose else logging.WARNING)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.command()
def convert(
    input_file: Path = typer.Argument(..., help="Path to the mermaid file (.mmd)."),
    output: Path = typer.Option(
        Path(DEFAULT_OUTPUT), "--output", "-o", help="Output file path."
    ),
    png: Optional[Path] = typer.Option(
        None, "--png", help="Also write a PNG preview to this path."
    ),
    diagram_name: str = typer.Option("Sitemap", help="Name of the draw.io page."),
    node_spacing: float = typer.Option(60, help="Horizontal gap between boxes."),
    rank_spacing: float = typer.Option(80, help="Vertical gap between levels."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each stage."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    _configure_logging(verbose)

    try:
        converter = SitemapConverter(
            layout_engine=NetworkXLayout(
                node_spacing=node_spacing, rank_spacing=rank_spacing
            ),
            diagram_name=diagram_name,
        )
        written = converter.convert_file(input_file, output, png_path=png)
    except EmptyGraphError as exc:
        console.print(f"[yellow]Warning:[/] {exc}")
        raise typer.Exit(code=1) from exc
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"[green]Success![/] Created {written}")
    if png is not None:
        console.print(f"[green]Wrote[/] {png}")


if __name__ == "__main__":
    app()
