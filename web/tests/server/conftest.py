from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from web.server.config import ServerConfig
from web.server.main import create_app

SLIDE_XML = """<image type="flex-image-pyramid" fileFormat="jpg">
    <level width="256" height="128" tileWidth="256" tileHeight="128"/>
    <level width="1024" height="512" tileWidth="512" tileHeight="512"/>
</image>
"""


@pytest.fixture()
def pyramid_root(tmp_path: Path) -> Path:
    root = tmp_path / "pyramids"
    root.mkdir()

    (root / "slide.xml").write_text(SLIDE_XML)
    tiles_dir = root / "slide_files" / "1"
    tiles_dir.mkdir(parents=True)
    (tiles_dir / "1_0.jpg").write_bytes(b"\xff\xd8\xff\xd9")

    # Descriptors the index must skip
    (root / "other.json").write_text(json.dumps({"type": "image-pyramid"}))
    (root / "broken.xml").write_text("<image")
    (root / "empty.json").write_text(
        json.dumps({"type": "flex-image-pyramid", "levels": [{"width": 10}]})
    )
    (root / "notes.txt").write_text("not a descriptor")
    (root / "scalar_levels.json").write_text(
        json.dumps({"type": "flex-image-pyramid", "levels": 5})
    )

    return root


@pytest.fixture()
def app_context(pyramid_root: Path):
    app = create_app(ServerConfig(pyramid_dirs=[pyramid_root]))
    pyramid_id = next(iter(app.state.pyramids))
    return app, pyramid_id


@pytest.fixture()
def client(app_context) -> TestClient:
    app, _pyramid_id = app_context
    return TestClient(app)


@pytest.fixture()
def pyramid_id(app_context) -> str:
    _app, pyramid_id = app_context
    return pyramid_id
