"""Tests for FlexTileSource."""

from __future__ import annotations

import math
from pathlib import Path

import pytest

from flextile.ui.source import FlexTileSource


@pytest.fixture
def source(qapp) -> FlexTileSource:
    """Create a fresh FlexTileSource."""
    return FlexTileSource()


@pytest.fixture
def loaded_source(source: FlexTileSource, xml_descriptor: Path) -> FlexTileSource:
    assert source.load(str(xml_descriptor), "https://host/slide.xml")
    return source


class TestFlexTileSource:
    """Tests for FlexTileSource loading and queries."""

    def test_initial_state(self, source):
        assert not source.isLoaded
        assert source.width == 0
        assert source.height == 0
        assert source.numLevels == 0
        assert source.getTileUrl(0, 0, 0) == ""
        assert math.isnan(source.getLevelScale(0))

    def test_load_valid_descriptor(self, loaded_source):
        assert loaded_source.isLoaded
        assert loaded_source.width == 2000
        assert loaded_source.height == 1000
        assert loaded_source.numLevels == 3
        assert loaded_source.fileFormat == "jpg"
        assert loaded_source.tilesUrl == "https://host/slide_files/"

    def test_load_emits_signal(self, source, xml_descriptor):
        received = []
        source.pyramidLoaded.connect(lambda: received.append(True))

        source.load(str(xml_descriptor))

        assert received == [True]

    def test_load_nonexistent_path(self, source, temp_dir):
        assert source.load(str(temp_dir / "missing.xml")) is False
        assert not source.isLoaded

    def test_load_unsupported_document(self, source, temp_dir):
        """Collections fail to load without raising."""
        path = temp_dir / "collection.xml"
        path.write_text("<collection/>")

        assert source.load(str(path)) is False
        assert not source.isLoaded

    def test_load_scalar_levels(self, source, temp_dir):
        path = temp_dir / "bad.json"
        path.write_text('{"type": "flex-image-pyramid", "levels": 5}')

        assert source.load(str(path)) is False
        assert not source.isLoaded

    def test_close(self, loaded_source):
        loaded_source.close()

        assert not loaded_source.isLoaded
        assert loaded_source.numLevels == 0

    def test_tile_queries(self, loaded_source):
        assert loaded_source.getTileWidth(1) == 256
        assert loaded_source.getTileHeight(0) == 125
        assert loaded_source.getLevelScale(2) == 1.0
        assert loaded_source.getNumTiles(1) == [4, 2]
        assert loaded_source.getTileBounds(1, 3, 1) == [768, 256, 232, 244]

    def test_get_tile_url(self, loaded_source):
        assert loaded_source.getTileUrl(2, 3, 1) == "https://host/slide_files/2/3_1.jpg"

    @pytest.mark.parametrize(
        "level, x, y",
        [(3, 0, 0), (-1, 0, 0), (1, 4, 0), (1, 0, 2), (1, -1, 0)],
        ids=["level-high", "level-negative", "x-high", "y-high", "x-negative"],
    )
    def test_get_tile_url_out_of_range(self, loaded_source, level, x, y):
        assert loaded_source.getTileUrl(level, x, y) == ""

    def test_invalid_level_geometry(self, loaded_source):
        assert loaded_source.getNumTiles(5) == [0, 0]
        assert loaded_source.getTileBounds(5, 0, 0) == [0, 0, 0, 0]
