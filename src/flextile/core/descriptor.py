"""Recognition and configuration of flex pyramid descriptors.

A descriptor arrives either as a plain mapping (decoded JSON) or as a
parsed XML element tree::

    <image type="flex-image-pyramid" fileFormat="jpg" url="...">
        <level width="512" height="384" tileWidth="256" tileHeight="256"/>
        ...
    </image>

:func:`configure` turns either form into an options mapping accepted by
:meth:`flextile.core.pyramid.FlexPyramid.from_options`.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from typing import Any
from xml.etree import ElementTree as ET

from flextile.config import PYRAMID_TYPE, TILES_DIR_SUFFIX
from flextile.core.errors import (
    CollectionNotSupportedError,
    DescriptorError,
    MalformedDocumentError,
    UnknownDocumentError,
    UpstreamDocumentError,
)

logger = logging.getLogger(__name__)

# Trailing "name[.flex|.xml|.js][?query][/]" of a descriptor URL
_DESCRIPTOR_NAME_RE = re.compile(r"([^/]+?)(\.(flex|xml|js)?(\?[^/]*)?)?/?$")
_DESCRIPTOR_QUERY_RE = re.compile(r"\.(flex|xml|js)\?")
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)", re.ASCII)

_LEVEL_ATTRIBUTES = ("width", "height", "tileWidth", "tileHeight")


def _root_of(document: Any) -> Any:
    """Return the root element of an ElementTree, or the element itself."""
    getroot = getattr(document, "getroot", None)
    if callable(getroot):
        return getroot()
    return document


def _local_name(tag: Any) -> Any:
    """Element tag without an ElementTree ``{namespace}`` prefix."""
    if isinstance(tag, str):
        return tag.rpartition("}")[2]
    return tag


def supports(data: Any) -> bool:
    """Whether a descriptor (mapping or XML document) is a flex pyramid."""
    if isinstance(data, Mapping):
        return data.get("type") == PYRAMID_TYPE

    root = _root_of(data)
    if root is None or not hasattr(root, "get"):
        return False
    return root.get("type") == PYRAMID_TYPE


def parse_int_attribute(value: str | None) -> int | float:
    """Parse an XML attribute as a base-10 integer.

    Accepts leading whitespace, an optional sign and trailing garbage
    (``"256px"`` gives 256). Anything without leading digits gives NaN,
    which level normalization later rejects.
    """
    if value is None:
        return math.nan
    match = _LEADING_INT_RE.match(value)
    if match is None:
        return math.nan
    return int(match.group(1))


def configure_from_object(configuration: Mapping[str, Any]) -> dict:
    """Options for a mapping descriptor: passed through as a shallow copy.

    Raises:
        MalformedDocumentError: ``levels`` is present but not a list
    """
    levels = configuration.get("levels")
    if levels is not None and not isinstance(levels, (list, tuple)):
        raise MalformedDocumentError(
            f"Flex Image Pyramid levels must be a list, got {type(levels).__name__}."
        )
    return dict(configuration)


def configure_from_xml(document: Any) -> dict:
    """Options for an XML descriptor.

    Args:
        document: ``xml.etree.ElementTree`` element or tree

    Raises:
        MalformedDocumentError: No document, or the image element could not
            be read
        CollectionNotSupportedError: Root element is ``<collection>``
        UpstreamDocumentError: Root element is ``<error>``
        UnknownDocumentError: Any other root element
    """
    root = _root_of(document) if document is not None else None
    if root is None or not hasattr(root, "tag"):
        raise MalformedDocumentError("Invalid or missing Flex Image Pyramid XML.")

    root_name = _local_name(root.tag)

    if root_name == "image":
        try:
            conf = {
                "type": root.get("type"),
                "fileFormat": root.get("fileFormat"),
                "url": root.get("url"),
                "levels": [],
            }
            for level in root.iter():
                if _local_name(level.tag) != "level":
                    continue
                conf["levels"].append(
                    {name: parse_int_attribute(level.get(name)) for name in _LEVEL_ATTRIBUTES}
                )
            return configure_from_object(conf)
        except DescriptorError:
            raise
        except Exception as e:
            raise MalformedDocumentError(
                "Unknown error parsing Flex Image Pyramid XML."
            ) from e

    if root_name == "collection":
        raise CollectionNotSupportedError(
            "Flex Image Pyramid Collections not yet supported."
        )
    if root_name == "error":
        raise UpstreamDocumentError(f"Error: {ET.tostring(root, encoding='unicode')}")

    raise UnknownDocumentError(root_name)


def derive_tiles_url(url: str) -> str:
    """Tiles directory URL for a descriptor URL.

    ``https://host/img.xml?t=1`` becomes ``https://host/img_files/``.
    """
    return _DESCRIPTOR_NAME_RE.sub(rf"\1{TILES_DIR_SUFFIX}", url, count=1)


def derive_query_params(url: str) -> str:
    """Query string carried directly after a descriptor extension, else ''."""
    if _DESCRIPTOR_QUERY_RE.search(url) is None:
        return ""
    return url[url.index("?"):]


def configure(configuration: Any, data_url: str | None = None) -> dict:
    """Turn a raw descriptor into pyramid options.

    Mappings pass through unchanged; anything else is treated as an XML
    document. When the result has no ``tilesUrl``, one is derived from
    ``data_url`` (or the descriptor's own ``url``) together with its query
    suffix.

    Args:
        configuration: Decoded JSON mapping or parsed XML document
        data_url: URL the descriptor was retrieved from, if any

    Returns:
        Options mapping with ``levels``, ``tilesUrl``, ``fileFormat`` and
        ``queryParams`` keys where known

    Raises:
        DescriptorError: If the descriptor cannot be configured
    """
    if isinstance(configuration, Mapping):
        options = configure_from_object(configuration)
    else:
        options = configure_from_xml(configuration)

    url = data_url or options.get("url")
    if url and not options.get("tilesUrl"):
        if not isinstance(url, str):
            raise MalformedDocumentError(
                f"Flex Image Pyramid url must be a string, got {type(url).__name__}."
            )
        options["tilesUrl"] = derive_tiles_url(url)
        options["queryParams"] = derive_query_params(url)
        logger.debug("Derived tiles URL %s from %s", options["tilesUrl"], url)

    return options
