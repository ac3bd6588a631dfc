"""FlexTileSource exposing a flex pyramid to QML viewers."""

from __future__ import annotations

import logging
import math
from pathlib import Path

from PySide6.QtCore import QObject, Signal, Slot, Property

from flextile.core.errors import DescriptorError
from flextile.core.loader import load_pyramid
from flextile.core.pyramid import FlexPyramid, TileSizeProvider

logger = logging.getLogger(__name__)


class FlexTileSource(QObject):
    """Tile source for a flex image pyramid.

    Loads a descriptor file and answers the geometry and tile URL queries
    a QML tile viewer issues while deciding which tiles to fetch.
    """

    pyramidLoaded = Signal()
    pyramidClosed = Signal()

    def __init__(
        self,
        parent: QObject | None = None,
        tile_size_provider: TileSizeProvider | None = None,
    ) -> None:
        super().__init__(parent)
        self._pyramid: FlexPyramid | None = None
        self._tile_size_provider = tile_size_provider

    @property
    def pyramid(self) -> FlexPyramid | None:
        """The loaded pyramid, if any."""
        return self._pyramid

    @Slot(str, result=bool)
    def load(self, path: str, data_url: str = "") -> bool:
        """Load a flex pyramid descriptor.

        Args:
            path: Path to the descriptor file
            data_url: URL the descriptor is served from (optional)

        Returns:
            True if loaded successfully
        """
        path = Path(path)
        if not path.exists():
            logger.error("Descriptor does not exist: %s", path)
            return False

        try:
            pyramid = load_pyramid(path, data_url or None, self._tile_size_provider)
        except DescriptorError as e:
            logger.error("Failed to load descriptor %s: %s", path, e)
            return False

        self._pyramid = pyramid
        self.pyramidLoaded.emit()
        return True

    @Slot()
    def close(self) -> None:
        """Close the current pyramid."""
        self._pyramid = None
        self.pyramidClosed.emit()

    @Property(bool, notify=pyramidLoaded)
    def isLoaded(self) -> bool:
        """Whether a pyramid is currently loaded."""
        return self._pyramid is not None

    @Property(int, notify=pyramidLoaded)
    def width(self) -> int:
        """Full-resolution width in pixels."""
        if not self._pyramid:
            return 0
        return self._pyramid.width

    @Property(int, notify=pyramidLoaded)
    def height(self) -> int:
        """Full-resolution height in pixels."""
        if not self._pyramid:
            return 0
        return self._pyramid.height

    @Property(int, notify=pyramidLoaded)
    def numLevels(self) -> int:
        """Number of pyramid levels."""
        if not self._pyramid:
            return 0
        return self._pyramid.num_levels

    @Property(str, notify=pyramidLoaded)
    def fileFormat(self) -> str:
        if not self._pyramid:
            return ""
        return self._pyramid.file_format

    @Property(str, notify=pyramidLoaded)
    def tilesUrl(self) -> str:
        if not self._pyramid:
            return ""
        return self._pyramid.tiles_url

    def _valid_level(self, level: int) -> bool:
        return self._pyramid is not None and 0 <= level < self._pyramid.num_levels

    @Slot(int, result=int)
    def getTileWidth(self, level: int) -> int:
        """Tile width at a level (falls back to the default tile size)."""
        if not self._pyramid:
            return 0
        return self._pyramid.tile_width(level)

    @Slot(int, result=int)
    def getTileHeight(self, level: int) -> int:
        """Tile height at a level (falls back to the default tile size)."""
        if not self._pyramid:
            return 0
        return self._pyramid.tile_height(level)

    @Slot(int, result=float)
    def getLevelScale(self, level: int) -> float:
        """Level width relative to full resolution, NaN if out of range."""
        if not self._pyramid:
            return math.nan
        return self._pyramid.level_scale(level)

    @Slot(int, result="QVariantList")
    def getNumTiles(self, level: int) -> list:
        """Get the tile grid of a level.

        Returns: [cols, rows], or [0, 0] for an invalid level
        """
        if not self._valid_level(level):
            logger.debug("Invalid level %d", level)
            return [0, 0]
        grid = self._pyramid.num_tiles(level)
        return [grid.cols, grid.rows]

    @Slot(int, int, int, result=str)
    def getTileUrl(self, level: int, x: int, y: int) -> str:
        """Get the URL for a tile.

        Args:
            level: Pyramid level
            x: Column index (0-based)
            y: Row index (0-based)

        Returns:
            Tile URL, or empty string if the coordinates are outside the level's grid.
        """
        if not self._valid_level(level):
            logger.debug("Invalid level %d", level)
            return ""

        cols, rows = self._pyramid.num_tiles(level)
        if x < 0 or x >= cols:
            logger.debug("Invalid x %d for level %d (valid: 0-%d)", x, level, cols - 1)
            return ""
        if y < 0 or y >= rows:
            logger.debug("Invalid y %d for level %d (valid: 0-%d)", y, level, rows - 1)
            return ""

        return self._pyramid.tile_url(level, x, y)

    @Slot(int, int, int, result="QVariantList")
    def getTileBounds(self, level: int, x: int, y: int) -> list:
        """Get the pixel rectangle of a tile within its level.

        Returns: [x, y, width, height]
        """
        if not self._valid_level(level):
            return [0, 0, 0, 0]
        return list(self._pyramid.tile_bounds(level, x, y))
