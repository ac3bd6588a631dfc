"""Validation and ordering of raw level descriptors."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

from flextile.config import NO_URL_PLACEHOLDER
from flextile.core.types import Level

logger = logging.getLogger(__name__)

#: Descriptor keys that must all be present for a level to be kept
REQUIRED_FIELDS: tuple[str, ...] = ("height", "width", "tileHeight", "tileWidth")


def parse_dimension(value: Any) -> int | None:
    """Parse a descriptor dimension into a positive integer.

    Returns None when the value counts as absent: None, blank strings,
    booleans, zero, NaN, infinities, negatives, non-integral numbers and
    anything that does not parse as a number.

    Examples:
        >>> parse_dimension("256")
        256
        >>> parse_dimension(0) is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    elif isinstance(value, int):
        return value if value > 0 else None
    elif isinstance(value, float):
        number = value
    else:
        return None

    if not math.isfinite(number) or number <= 0 or not number.is_integer():
        return None
    return int(number)


def _to_level(descriptor: Any) -> Level | None:
    """Build a Level from a descriptor, or None if any field is absent."""
    if not isinstance(descriptor, Mapping):
        return None

    values = {name: parse_dimension(descriptor.get(name)) for name in REQUIRED_FIELDS}
    if any(v is None for v in values.values()):
        return None

    return Level(
        width=values["width"],
        height=values["height"],
        tile_width=values["tileWidth"],
        tile_height=values["tileHeight"],
    )


def _descriptor_url(descriptor: Any) -> str:
    if isinstance(descriptor, Mapping) and descriptor.get("url"):
        return str(descriptor["url"])
    return NO_URL_PLACEHOLDER


def normalize_levels(raw_levels: Iterable[Any] | None) -> list[Level]:
    """Filter raw level descriptors and sort them by ascending height.

    Descriptors missing any of ``width``, ``height``, ``tileWidth`` or
    ``tileHeight`` are dropped with an error log; the rest of the batch is
    still processed. The sort is stable, so levels sharing a height keep
    their input order.

    Args:
        raw_levels: Level descriptors as supplied by the descriptor source

    Returns:
        Normalized levels, smallest first. Empty if nothing qualified.
    """
    levels: list[Level] = []
    for descriptor in raw_levels or ():
        level = _to_level(descriptor)
        if level is None:
            logger.error("Unsupported image format: %s", _descriptor_url(descriptor))
            continue
        levels.append(level)

    return sorted(levels, key=lambda l: l.height)
