"""Loading flex pyramid descriptors from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any
from xml.etree import ElementTree as ET

from flextile.core.descriptor import configure
from flextile.core.errors import MalformedDocumentError
from flextile.core.pyramid import FlexPyramid, TileSizeProvider

logger = logging.getLogger(__name__)


def parse_descriptor_text(text: str) -> Any:
    """Parse descriptor text into a mapping (JSON) or an XML element.

    Text whose first non-blank character is ``<`` is parsed as XML,
    everything else as a JSON object.

    Raises:
        MalformedDocumentError: If the text is neither valid XML nor a
            JSON object
    """
    stripped = text.lstrip()
    if stripped.startswith("<"):
        try:
            return ET.fromstring(stripped)
        except ET.ParseError as e:
            raise MalformedDocumentError(f"Invalid descriptor XML: {e}") from e

    try:
        data = json.loads(stripped)
    except json.JSONDecodeError as e:
        raise MalformedDocumentError(f"Invalid descriptor JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedDocumentError(
            f"Descriptor JSON must be an object, got {type(data).__name__}"
        )
    return data


def read_descriptor(path: str | Path) -> Any:
    """Read and parse a descriptor file without configuring it."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedDocumentError(f"Cannot read descriptor {path}: {e}") from e
    return parse_descriptor_text(text)


def load_descriptor(path: str | Path, data_url: str | None = None) -> dict:
    """Read a descriptor file and configure pyramid options from it.

    Args:
        path: Descriptor file (``.flex``, ``.xml``, ``.js`` or ``.json``)
        data_url: URL the descriptor is served from. Defaults to the file's
            own POSIX path, so tiles resolve to ``<stem>_files/`` beside it.

    Returns:
        Options mapping for :meth:`FlexPyramid.from_options`

    Raises:
        DescriptorError: If the file cannot be read, parsed or configured
    """
    path = Path(path)
    data = read_descriptor(path)
    return configure(data, data_url or path.as_posix())


def load_pyramid(
    path: str | Path,
    data_url: str | None = None,
    tile_size_provider: TileSizeProvider | None = None,
) -> FlexPyramid:
    """Load a descriptor file straight into a :class:`FlexPyramid`."""
    options = load_descriptor(path, data_url)
    pyramid = FlexPyramid.from_options(options, tile_size_provider)
    logger.info(
        "Loaded flex pyramid %s: %dx%d, %d levels",
        path,
        pyramid.width,
        pyramid.height,
        pyramid.num_levels,
    )
    return pyramid
