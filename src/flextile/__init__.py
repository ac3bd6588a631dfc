"""FlexTile - addressing for flex image pyramids with per-level tiling."""

__version__ = "0.1.0"
