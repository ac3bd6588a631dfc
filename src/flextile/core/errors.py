"""Exceptions raised while configuring a flex pyramid from a descriptor."""

from __future__ import annotations


class DescriptorError(Exception):
    """Base class for fatal descriptor configuration failures."""


class MalformedDocumentError(DescriptorError):
    """The descriptor document is missing, unreadable or cannot be parsed."""


class CollectionNotSupportedError(DescriptorError):
    """The descriptor describes a multi-image collection."""


class UpstreamDocumentError(DescriptorError):
    """The descriptor source returned an ``<error>`` document."""


class UnknownDocumentError(DescriptorError):
    """The descriptor root element is not one this package understands."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"Unknown element {tag}")
        self.tag = tag
