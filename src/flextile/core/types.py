"""Shared type definitions for FlexTile core module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class TileCoord(NamedTuple):
    """Coordinate of a tile in the pyramid.

    Attributes:
        level: Pyramid level (0 = lowest resolution)
        col: Column index (0-based)
        row: Row index (0-based)
    """

    level: int
    col: int
    row: int


class GridSize(NamedTuple):
    """Number of tile columns and rows covering a level."""

    cols: int
    rows: int


@dataclass(frozen=True)
class Level:
    """One normalized resolution level of a flex pyramid.

    Every level carries its own tiling; tile sizes may differ between
    levels of the same pyramid.

    Attributes:
        width: Level width in pixels
        height: Level height in pixels
        tile_width: Width of a full tile at this level
        tile_height: Height of a full tile at this level
    """

    width: int
    height: int
    tile_width: int
    tile_height: int

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "tileWidth": self.tile_width,
            "tileHeight": self.tile_height,
        }


@dataclass(frozen=True)
class PyramidConfig:
    """Immutable description of a flex pyramid.

    Built by :func:`flextile.core.pyramid.build_pyramid_config`, which
    establishes the dimension and level-range invariants.

    Attributes:
        levels: Normalized levels, index 0 = smallest
        tiles_url: Prefix every tile URL starts with
        file_format: Tile file extension without the dot
        query_params: Suffix appended after the extension (may be empty)
        width: Width of the highest-resolution level (0 if no levels)
        height: Height of the highest-resolution level (0 if no levels)
        tile_overlap: Always 0
        min_level: Always 0
        max_level: ``len(levels) - 1``, or 0 if there are no levels
    """

    levels: tuple[Level, ...]
    tiles_url: str
    file_format: str
    query_params: str
    width: int
    height: int
    tile_overlap: int = 0
    min_level: int = 0
    max_level: int = 0
