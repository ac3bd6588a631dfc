from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse, RedirectResponse

from flextile.config import DESCRIPTOR_EXTENSIONS
from flextile.core.descriptor import configure, supports
from flextile.core.errors import DescriptorError
from flextile.core.loader import read_descriptor
from flextile.core.pyramid import FlexPyramid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PyramidRecord:
    pyramid_id: str
    name: str
    descriptor_path: Path
    descriptor_url: str
    pyramid: FlexPyramid

    @property
    def dir_path(self) -> Path:
        return self.descriptor_path.parent


def _pyramid_id_for_path(path: Path) -> str:
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()
    return digest[:12]


def _iter_descriptor_files(pyramid_dirs: Iterable[Path]) -> Iterable[Path]:
    for base_dir in pyramid_dirs:
        if not base_dir.exists():
            logger.warning("Pyramid dir does not exist: %s", base_dir)
            continue
        for path in sorted(base_dir.rglob("*")):
            if path.is_file() and path.suffix.lower() in DESCRIPTOR_EXTENSIONS:
                yield path


def build_pyramid_index(
    pyramid_dirs: Iterable[Path], public_base_url: str = ""
) -> dict[str, PyramidRecord]:
    pyramids: dict[str, PyramidRecord] = {}

    for descriptor_path in _iter_descriptor_files(pyramid_dirs):
        try:
            data = read_descriptor(descriptor_path)
        except DescriptorError as exc:
            logger.warning("Skipping unreadable descriptor %s: %s", descriptor_path, exc)
            continue

        if not supports(data):
            logger.debug("Skipping non-flex descriptor: %s", descriptor_path)
            continue

        pyramid_id = _pyramid_id_for_path(descriptor_path)
        descriptor_url = f"{public_base_url}/pyramids/{pyramid_id}/{descriptor_path.name}"
        try:
            options = configure(data, descriptor_url)
            pyramid = FlexPyramid.from_options(options)
        except DescriptorError as exc:
            logger.warning("Skipping invalid descriptor %s: %s", descriptor_path, exc)
            continue

        if pyramid.is_empty:
            logger.warning("Skipping pyramid without usable levels: %s", descriptor_path)
            continue

        pyramids[pyramid_id] = PyramidRecord(
            pyramid_id=pyramid_id,
            name=descriptor_path.stem,
            descriptor_path=descriptor_path,
            descriptor_url=descriptor_url,
            pyramid=pyramid,
        )

    return pyramids


def create_pyramids_router(pyramids: dict[str, PyramidRecord]) -> APIRouter:
    router = APIRouter()

    def _get_record(pyramid_id: str) -> PyramidRecord:
        record = pyramids.get(pyramid_id)
        if not record:
            raise HTTPException(status_code=404, detail="Pyramid not found")
        return record

    @router.get("/api/pyramids")
    def list_pyramids() -> JSONResponse:
        response = []
        for record in pyramids.values():
            pyramid = record.pyramid
            response.append(
                {
                    "id": record.pyramid_id,
                    "name": record.name,
                    "dimensions": list(pyramid.dimensions),
                    "numLevels": pyramid.num_levels,
                    "fileFormat": pyramid.file_format,
                    "descriptorUrl": record.descriptor_url,
                }
            )
        return JSONResponse(
            content=response,
            headers={"Cache-Control": "public, max-age=60"},
        )

    @router.get("/api/pyramids/{pyramid_id}")
    def get_pyramid(pyramid_id: str) -> JSONResponse:
        record = _get_record(pyramid_id)
        content = {
            "id": record.pyramid_id,
            "name": record.name,
            **record.pyramid.describe(),
        }
        return JSONResponse(
            content=content,
            headers={"Cache-Control": "public, max-age=3600"},
        )

    @router.get("/api/pyramids/{pyramid_id}/tiles/{level}/{x}/{y}")
    def get_tile(pyramid_id: str, level: int, x: int, y: int) -> RedirectResponse:
        pyramid = _get_record(pyramid_id).pyramid
        if not pyramid.min_level <= level <= pyramid.max_level:
            raise HTTPException(status_code=404, detail="Level out of range")
        cols, rows = pyramid.num_tiles(level)
        if not (0 <= x < cols and 0 <= y < rows):
            raise HTTPException(status_code=404, detail="Tile out of range")
        return RedirectResponse(pyramid.tile_url(level, x, y), status_code=307)

    return router
