"""CLI entry point for inspecting flex pyramid descriptors."""

from __future__ import annotations

import logging
import math
import sys
from collections.abc import Iterator
from pathlib import Path

import click

from flextile.core.errors import DescriptorError
from flextile.core.loader import load_pyramid
from flextile.core.pyramid import FlexPyramid
from flextile.core.types import TileCoord

logger = logging.getLogger(__name__)


def _load_or_exit(descriptor: str, url: str | None) -> FlexPyramid:
    """Load a pyramid, printing the error and exiting on failure."""
    try:
        return load_pyramid(Path(descriptor), url)
    except DescriptorError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


def iter_level_tiles(pyramid: FlexPyramid, level: int) -> Iterator[TileCoord]:
    """Yield every tile coordinate of a level in row-major order."""
    cols, rows = pyramid.num_tiles(level)
    for row in range(rows):
        for col in range(cols):
            yield TileCoord(level, col, row)


def _format_scale(scale: float) -> str:
    return "n/a" if math.isnan(scale) else f"{scale:.4f}"


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """Inspect flex image pyramids and derive their tile URLs.

    Examples:

        # Show geometry of every level
        python -m flextile info image.xml

        # List tile URLs of level 2 as served from a web host
        python -m flextile tiles image.xml 2 --url https://host/image.xml
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("descriptor", type=click.Path(exists=True, dir_okay=False))
@click.option("--url", default=None, help="URL the descriptor is served from")
def info(descriptor: str, url: str | None) -> None:
    """Print dimensions and per-level geometry of DESCRIPTOR."""
    pyramid = _load_or_exit(descriptor, url)

    click.echo(click.style("Flex Image Pyramid", fg="cyan", bold=True))
    click.echo(click.style("=" * 40, fg="cyan"))
    click.echo(f"Dimensions: {pyramid.width}x{pyramid.height}")
    click.echo(f"Levels: {pyramid.num_levels}")
    click.echo(f"Tiles URL: {pyramid.tiles_url}")
    click.echo(f"File format: {pyramid.file_format}")

    if pyramid.is_empty:
        click.echo(click.style("No supported levels found", fg="yellow"))
        return

    click.echo()
    for level, level_info in enumerate(pyramid.levels):
        cols, rows = pyramid.num_tiles(level)
        click.echo(
            f"  {level}: {level_info.width}x{level_info.height} "
            f"tile {level_info.tile_width}x{level_info.tile_height} "
            f"grid {cols}x{rows} "
            f"scale {_format_scale(pyramid.level_scale(level))}"
        )


@main.command()
@click.argument("descriptor", type=click.Path(exists=True, dir_okay=False))
@click.argument("level", type=int)
@click.option("--url", default=None, help="URL the descriptor is served from")
def tiles(descriptor: str, level: int, url: str | None) -> None:
    """Print every tile URL of LEVEL in DESCRIPTOR, row by row."""
    pyramid = _load_or_exit(descriptor, url)

    if pyramid.is_empty or not pyramid.min_level <= level <= pyramid.max_level:
        click.echo(
            f"Level {level} out of range ({pyramid.num_levels} levels)", err=True
        )
        sys.exit(1)

    for coord in iter_level_tiles(pyramid, level):
        click.echo(pyramid.tile_url(*coord))


if __name__ == "__main__":
    main()
