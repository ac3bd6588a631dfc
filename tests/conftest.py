"""Test fixtures for FlexTile tests."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Generator
from xml.etree import ElementTree as ET

import pytest
from PySide6.QtCore import QCoreApplication

FLEX_XML = """<?xml version="1.0" encoding="UTF-8"?>
<image type="flex-image-pyramid" fileFormat="jpg" url="https://host/slide.xml">
    <level width="2000" height="1000" tileWidth="512" tileHeight="512"/>
    <level width="250" height="125" tileWidth="250" tileHeight="125"/>
    <level width="1000" height="500" tileWidth="256" tileHeight="256"/>
</image>
"""


@pytest.fixture(scope="session")
def qapp():
    """Create a Qt core application for testing (shared across all test files)."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def raw_levels() -> list[dict]:
    """Level descriptors in object form, deliberately unsorted.

    Sorted by height: 250x125 (1x1 tiles), 1000x500 (4x2 tiles of 256)
    and 2000x1000 (4x2 tiles of 512).
    """
    return [
        {"url": "high.jpg", "width": 2000, "height": 1000, "tileWidth": 512, "tileHeight": 512},
        {"url": "thumb.jpg", "width": "250", "height": "125", "tileWidth": "250", "tileHeight": "125"},
        {"url": "mid.jpg", "width": 1000, "height": 500, "tileWidth": 256, "tileHeight": 256},
    ]


@pytest.fixture
def flex_options(raw_levels: list[dict]) -> dict:
    """Object-form descriptor with an explicit tiles URL."""
    return {
        "type": "flex-image-pyramid",
        "levels": raw_levels,
        "tilesUrl": "https://host/slide_files/",
        "fileFormat": "jpg",
    }


@pytest.fixture
def xml_descriptor(temp_dir: Path) -> Path:
    """An XML descriptor file with three levels."""
    path = temp_dir / "slide.xml"
    path.write_text(FLEX_XML, encoding="utf-8")
    return path


@pytest.fixture
def json_descriptor(temp_dir: Path, raw_levels: list[dict]) -> Path:
    """A JSON descriptor file without a tiles URL."""
    path = temp_dir / "slide.json"
    data = {"type": "flex-image-pyramid", "levels": raw_levels, "fileFormat": "png"}
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def flex_xml() -> ET.Element:
    """Parsed XML descriptor root with three levels."""
    return ET.fromstring(FLEX_XML)
