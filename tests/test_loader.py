"""Tests for loading descriptors from disk."""

from __future__ import annotations

from pathlib import Path

import pytest

from flextile.core.errors import (
    CollectionNotSupportedError,
    MalformedDocumentError,
)
from flextile.core.loader import (
    load_descriptor,
    load_pyramid,
    parse_descriptor_text,
)


class TestParseDescriptorText:
    def test_json_object(self):
        data = parse_descriptor_text('{"type": "flex-image-pyramid"}')
        assert data == {"type": "flex-image-pyramid"}

    def test_xml_with_leading_whitespace(self):
        root = parse_descriptor_text('\n  <image type="flex-image-pyramid"/>')
        assert root.tag == "image"

    @pytest.mark.parametrize(
        "text",
        ["<image", "{not json", "[1, 2]", ""],
        ids=["broken-xml", "broken-json", "json-array", "empty"],
    )
    def test_malformed(self, text):
        with pytest.raises(MalformedDocumentError):
            parse_descriptor_text(text)


class TestLoadDescriptor:
    """Tests for file-based configuration."""

    def test_xml_file_with_url(self, xml_descriptor: Path):
        options = load_descriptor(xml_descriptor, "https://host/slide.xml")

        assert options["tilesUrl"] == "https://host/slide_files/"
        assert len(options["levels"]) == 3

    def test_tiles_dir_next_to_file(self, json_descriptor: Path):
        """Without a URL the tiles directory sits beside the descriptor."""
        options = load_descriptor(json_descriptor)

        assert options["tilesUrl"] == json_descriptor.parent.as_posix() + "/slide.json_files/"

    def test_missing_file(self, temp_dir: Path):
        with pytest.raises(MalformedDocumentError):
            load_descriptor(temp_dir / "missing.xml")

    def test_collection_file(self, temp_dir: Path):
        path = temp_dir / "many.xml"
        path.write_text("<collection/>")

        with pytest.raises(CollectionNotSupportedError):
            load_descriptor(path)


class TestLoadPyramid:
    def test_xml_pyramid(self, xml_descriptor: Path):
        pyramid = load_pyramid(xml_descriptor, "https://host/slide.xml?sig=1")

        assert pyramid.dimensions == (2000, 1000)
        assert pyramid.tile_url(2, 3, 1) == "https://host/slide_files/2/3_1.jpg?sig=1"

    def test_json_pyramid(self, json_descriptor: Path):
        pyramid = load_pyramid(json_descriptor, "https://host/slide.js")

        assert pyramid.num_levels == 3
        assert pyramid.tile_url(0, 0, 0) == "https://host/slide_files/0/0_0.png"

    def test_empty_pyramid_loads(self, temp_dir: Path):
        path = temp_dir / "empty.xml"
        path.write_text('<image type="flex-image-pyramid" fileFormat="jpg"/>')

        pyramid = load_pyramid(path)

        assert pyramid.is_empty
        assert pyramid.dimensions == (0, 0)

    @pytest.mark.parametrize(
        "levels",
        ["5", '"levels"', '{"width": 10}'],
        ids=["number", "string", "object"],
    )
    def test_non_list_levels_rejected(self, temp_dir: Path, levels):
        path = temp_dir / "bad.json"
        path.write_text(f'{{"type": "flex-image-pyramid", "levels": {levels}}}')

        with pytest.raises(MalformedDocumentError, match="levels must be a list"):
            load_pyramid(path)
