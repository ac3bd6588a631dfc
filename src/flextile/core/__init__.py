"""Level normalization, pyramid geometry and tile addressing."""

from .descriptor import configure, supports
from .errors import DescriptorError
from .levels import normalize_levels
from .loader import load_descriptor, load_pyramid
from .pyramid import FlexPyramid, build_pyramid_config
from .types import GridSize, Level, PyramidConfig, TileCoord

__all__ = [
    "configure",
    "supports",
    "DescriptorError",
    "normalize_levels",
    "load_descriptor",
    "load_pyramid",
    "FlexPyramid",
    "build_pyramid_config",
    "GridSize",
    "Level",
    "PyramidConfig",
    "TileCoord",
]
