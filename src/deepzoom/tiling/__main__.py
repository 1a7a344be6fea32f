"""CLI entry point for deepzoom."""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

import click
from tqdm import tqdm

from deepzoom import __version__
from deepzoom.config import (
    DEFAULT_OVERLAP,
    DEFAULT_QUALITY,
    DEFAULT_RESIZE_FILTER,
    DEFAULT_TILE_SIZE,
    DEFAULT_WORKERS,
    SUPPORTED_FORMATS,
)

from .filters import filter_names
from .worker import create_deep_zoom


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_header(
    source: Path, destination: Path, fmt: str, tile_size: int, overlap: int, quality: float
) -> None:
    """Print the CLI banner with processing parameters."""
    click.echo(click.style("Deep Zoom Tiling", fg="cyan", bold=True))
    click.echo(click.style("=" * 40, fg="cyan"))
    click.echo(f"Source: {source} ({fmt})")
    click.echo(f"Destination: {destination}")
    click.echo(
        f"Tile size: {tile_size}px | Overlap: {overlap}px | "
        f"JPEG Q{round(quality * 100)}"
    )
    click.echo()


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-s",
    "--source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Source image file path",
)
@click.option(
    "-d",
    "--destination",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Destination .dzi descriptor path",
)
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(SUPPORTED_FORMATS, case_sensitive=False),
    default="jpg",
    show_default=True,
    help="Source image format",
)
@click.option(
    "-t",
    "--tile-size",
    type=click.IntRange(min=1),
    default=DEFAULT_TILE_SIZE,
    show_default=True,
    help="Tile size in pixels",
)
@click.option(
    "-l",
    "--overlap",
    type=click.IntRange(min=0),
    default=DEFAULT_OVERLAP,
    show_default=True,
    help="Tile overlap in pixels",
)
@click.option(
    "-q",
    "--quality",
    type=click.FloatRange(0.0, 1.0),
    default=DEFAULT_QUALITY,
    show_default=True,
    help="Output JPEG quality (0.0-1.0)",
)
@click.option(
    "-r",
    "--resize-filter",
    default=DEFAULT_RESIZE_FILTER,
    show_default=True,
    help=f"Resampling filter ({', '.join(filter_names())}); unknown names use nearest",
)
@click.option(
    "-w",
    "--workers",
    type=click.IntRange(min=1),
    default=DEFAULT_WORKERS,
    show_default=True,
    help="Threads encoding the tiles of each level",
)
@click.option("--quiet", is_flag=True, help="Hide the progress bar")
@click.option(
    "-v", "--verbose", is_flag=True, help="Enable debug logging (use -V for the version)"
)
@click.version_option(__version__, "-V", "--version", prog_name="deepzoom")
def main(
    source: Path,
    destination: Path,
    fmt: str,
    tile_size: int,
    overlap: int,
    quality: float,
    resize_filter: str,
    workers: int,
    quiet: bool,
    verbose: bool,
) -> None:
    """Generate a Deep Zoom (.dzi) tile pyramid from a JPEG or PNG image.

    Writes DESTINATION and a DESTINATION-stem_files/ directory holding one
    sub-directory of JPEG tiles per pyramid level.

    Examples:

        # Default 256px tiles, no overlap
        python -m deepzoom -s photo.jpg -d out/photo.dzi

        # PNG source, 254px tiles with 1px overlap
        python -m deepzoom -s scan.png -f png -t 254 -l 1 -d out/scan.dzi
    """
    _setup_logging(verbose)
    fmt = fmt.lower()
    if not quiet:
        _print_header(source, destination, fmt, tile_size, overlap, quality)

    start = time.perf_counter()
    with tqdm(total=0, desc="Writing tiles", unit="tile", disable=quiet) as pbar:

        def _on_progress(_stage: str, current: int, total: int) -> None:
            if pbar.total != total:
                pbar.total = total
                pbar.refresh()
            pbar.update(current - pbar.n)

        result, error = create_deep_zoom(
            source,
            destination,
            fmt,
            tile_size,
            overlap,
            quality,
            resize_filter,
            workers=workers,
            progress_callback=_on_progress,
        )

    if error:
        click.echo(click.style(f"Error: {error}", fg="red"), err=True)
        sys.exit(1)

    elapsed = time.perf_counter() - start
    click.echo(click.style("Successfully executed", fg="green"))
    click.echo(f"Descriptor: {result}")
    click.echo(f"Time consumption: {elapsed:.2f}s")


if __name__ == "__main__":
    main()
