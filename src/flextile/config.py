"""Centralized configuration for FlexTile.

Tunable parameters are defined here with sensible defaults.
Values can be overridden via environment variables.

Environment Variables:
    FLEXTILE_DEFAULT_TILE_SIZE: Fallback tile size in pixels for levels
        without their own tiling (default: 512)
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def _get_env_int(name: str, default: int) -> int:
    """Get an integer from environment variable with fallback."""
    value = os.environ.get(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            logger.warning(
                "Invalid integer for %s: %r, using default %d", name, value, default
            )
    return default


# =============================================================================
# Descriptor Recognition
# =============================================================================

#: Value of the ``type`` field/attribute identifying a flex pyramid descriptor
PYRAMID_TYPE: str = "flex-image-pyramid"

#: Suffix appended to the descriptor name to form the tiles directory URL
TILES_DIR_SUFFIX: str = "_files/"

#: File extensions considered when scanning for descriptor files
DESCRIPTOR_EXTENSIONS: frozenset[str] = frozenset({".flex", ".xml", ".js", ".json"})

#: Placeholder reported for rejected levels that have no URL
NO_URL_PLACEHOLDER: str = "<no URL>"


# =============================================================================
# Tile Geometry Defaults
# =============================================================================

#: Fallback tile size in pixels, used for levels outside the pyramid
DEFAULT_TILE_SIZE: int = _get_env_int("FLEXTILE_DEFAULT_TILE_SIZE", 512)

#: Tile overlap in pixels (flex pyramids never overlap)
TILE_OVERLAP: int = 0


def default_tile_size() -> tuple[int, int]:
    """Default tile size provider: ``(DEFAULT_TILE_SIZE, DEFAULT_TILE_SIZE)``."""
    return DEFAULT_TILE_SIZE, DEFAULT_TILE_SIZE


# =============================================================================
# Validation
# =============================================================================


def _validate_config() -> None:
    """Validate configuration values and log warnings for out-of-range settings."""
    global DEFAULT_TILE_SIZE

    if DEFAULT_TILE_SIZE < 1:
        logger.warning(
            "DEFAULT_TILE_SIZE=%d is too low, clamping to 1", DEFAULT_TILE_SIZE
        )
        DEFAULT_TILE_SIZE = 1


_validate_config()
