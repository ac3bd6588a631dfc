"""Geometry and tile addressing for flex image pyramids."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from flextile.config import TILE_OVERLAP, default_tile_size
from flextile.core.levels import normalize_levels
from flextile.core.types import GridSize, Level, PyramidConfig

logger = logging.getLogger(__name__)

#: Zero-argument callable returning the fallback ``(tile_width, tile_height)``
TileSizeProvider = Callable[[], tuple[int, int]]


def build_pyramid_config(
    levels: Sequence[Level],
    tiles_url: str | None,
    file_format: str | None,
    query_params: str | None = None,
) -> PyramidConfig:
    """Build an immutable pyramid config from normalized levels.

    The pyramid takes the dimensions of its last (highest-resolution)
    level. With no levels the result is a degenerate 0x0 pyramid; this is
    logged but not raised.

    Args:
        levels: Output of :func:`normalize_levels`
        tiles_url: Prefix for tile URLs
        file_format: Tile file extension without the dot
        query_params: Suffix appended to every tile URL

    Returns:
        A fully populated PyramidConfig
    """
    levels = tuple(levels)
    if levels:
        width = levels[-1].width
        height = levels[-1].height
    else:
        width = 0
        height = 0
        logger.error("No supported image formats found")

    return PyramidConfig(
        levels=levels,
        tiles_url=tiles_url or "",
        file_format=file_format or "",
        query_params=query_params or "",
        width=width,
        height=height,
        tile_overlap=TILE_OVERLAP,
        min_level=0,
        max_level=len(levels) - 1 if levels else 0,
    )


class FlexPyramid:
    """A flex image pyramid: levels with individual tiling plus URL naming.

    All queries are pure reads of the immutable :class:`PyramidConfig`, so
    one instance can be shared between readers.

    Tile URLs follow ``{tiles_url}{level}/{x}_{y}.{file_format}{query_params}``.
    """

    def __init__(
        self,
        config: PyramidConfig,
        tile_size_provider: TileSizeProvider | None = None,
    ) -> None:
        self._config = config
        self._tile_size_provider = tile_size_provider or default_tile_size

    @classmethod
    def from_options(
        cls,
        options: Mapping[str, Any],
        tile_size_provider: TileSizeProvider | None = None,
    ) -> FlexPyramid:
        """Create a pyramid from configured descriptor options.

        Args:
            options: Result of :func:`flextile.core.descriptor.configure`
            tile_size_provider: Fallback tile size for out-of-range levels
        """
        levels = normalize_levels(options.get("levels"))
        config = build_pyramid_config(
            levels,
            options.get("tilesUrl"),
            options.get("fileFormat"),
            options.get("queryParams"),
        )
        return cls(config, tile_size_provider)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def config(self) -> PyramidConfig:
        return self._config

    @property
    def levels(self) -> tuple[Level, ...]:
        return self._config.levels

    @property
    def num_levels(self) -> int:
        return len(self._config.levels)

    @property
    def is_empty(self) -> bool:
        """Whether no level survived normalization."""
        return not self._config.levels

    @property
    def width(self) -> int:
        return self._config.width

    @property
    def height(self) -> int:
        return self._config.height

    @property
    def dimensions(self) -> tuple[int, int]:
        return self._config.width, self._config.height

    @property
    def aspect_ratio(self) -> float:
        """Width over height of the full-resolution level (NaN if empty)."""
        if not self._config.height:
            return math.nan
        return self._config.width / self._config.height

    @property
    def tile_overlap(self) -> int:
        return self._config.tile_overlap

    @property
    def min_level(self) -> int:
        return self._config.min_level

    @property
    def max_level(self) -> int:
        return self._config.max_level

    @property
    def tiles_url(self) -> str:
        return self._config.tiles_url

    @property
    def file_format(self) -> str:
        return self._config.file_format

    @property
    def query_params(self) -> str:
        return self._config.query_params

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    def _has_level(self, level: int) -> bool:
        return 0 <= level < len(self._config.levels)

    def tile_width(self, level: int) -> int:
        """Tile width at a level, or the provider's fallback for unknown levels."""
        if self._has_level(level):
            return self._config.levels[level].tile_width
        return self._tile_size_provider()[0]

    def tile_height(self, level: int) -> int:
        """Tile height at a level, or the provider's fallback for unknown levels."""
        if self._has_level(level):
            return self._config.levels[level].tile_height
        return self._tile_size_provider()[1]

    def level_scale(self, level: int) -> float:
        """Ratio of a level's width to the full-resolution width.

        Returns:
            A value in (0, 1], 1.0 at ``max_level``. NaN for levels outside
            ``[min_level, max_level]`` or on an empty pyramid; check with
            ``math.isnan`` before use.
        """
        levels = self._config.levels
        if levels and self.min_level <= level <= self.max_level:
            return levels[level].width / levels[self.max_level].width
        return math.nan

    def num_tiles(self, level: int) -> GridSize:
        """Tile columns and rows covering a level at its own tile size.

        Raises:
            IndexError: If ``level`` is not in ``[min_level, max_level]``.
                Callers are expected to check the range first.
        """
        info = self._level(level)
        cols = math.ceil(info.width / self.tile_width(level))
        rows = math.ceil(info.height / self.tile_height(level))
        return GridSize(cols, rows)

    def tile_bounds(self, level: int, x: int, y: int) -> tuple[int, int, int, int]:
        """Pixel rectangle ``(x, y, width, height)`` of a tile within its level.

        Edge tiles are clamped to the level boundaries; tiles entirely
        outside the level get zero width or height.

        Raises:
            IndexError: If ``level`` is not a valid level index.
        """
        info = self._level(level)
        tile_w = self.tile_width(level)
        tile_h = self.tile_height(level)

        left = x * tile_w
        top = y * tile_h
        actual_width = max(0, min(tile_w, info.width - left))
        actual_height = max(0, min(tile_h, info.height - top))
        return left, top, actual_width, actual_height

    def _level(self, level: int) -> Level:
        if not self._has_level(level):
            raise IndexError(f"Level {level} out of range for {self.num_levels} levels")
        return self._config.levels[level]

    # -------------------------------------------------------------------------
    # Addressing
    # -------------------------------------------------------------------------

    def tile_url(self, level: int, x: int, y: int) -> str:
        """Derive the URL of one tile.

        No bounds checking or escaping is done; the result is well formed
        for any integer coordinates.

        Example:
            ``https://host/img_files/`` + level 2, x 3, y 1, ``jpg``
            gives ``https://host/img_files/2/3_1.jpg``.
        """
        config = self._config
        return (
            f"{config.tiles_url}{level}/{x}_{y}."
            f"{config.file_format}{config.query_params}"
        )

    def describe(self) -> dict:
        """JSON-ready summary of the pyramid and its per-level geometry."""
        levels = []
        for index, info in enumerate(self._config.levels):
            grid = self.num_tiles(index)
            levels.append(
                {
                    "level": index,
                    **info.to_dict(),
                    "cols": grid.cols,
                    "rows": grid.rows,
                    "scale": self.level_scale(index),
                }
            )
        return {
            "dimensions": list(self.dimensions),
            "tileOverlap": self.tile_overlap,
            "minLevel": self.min_level,
            "maxLevel": self.max_level,
            "fileFormat": self.file_format,
            "tilesUrl": self.tiles_url,
            "queryParams": self.query_params,
            "levels": levels,
        }
