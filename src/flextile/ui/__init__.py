"""Qt integration for FlexTile."""

from .source import FlexTileSource

__all__ = ["FlexTileSource"]
