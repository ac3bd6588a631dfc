from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from starlette.middleware.gzip import GZipMiddleware

from .config import ServerConfig, load_config
from .routes.pyramids import PyramidRecord, build_pyramid_index, create_pyramids_router

logger = logging.getLogger(__name__)


def _resolve_pyramid_file(record: PyramidRecord, relative_path: str) -> Path:
    candidate = (record.dir_path / relative_path).resolve()
    try:
        candidate.relative_to(record.dir_path.resolve())
    except ValueError as exc:
        raise HTTPException(status_code=404, detail="File not found") from exc
    if not candidate.exists() or not candidate.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return candidate


def _content_type_for(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix in {".xml", ".flex"}:
        return "application/xml"
    if suffix in {".json", ".js"}:
        return "application/json"
    return mimetypes.guess_type(path.as_posix())[0] or "application/octet-stream"


def create_app(config: ServerConfig | None = None) -> FastAPI:
    config = config or load_config()
    pyramids = build_pyramid_index(config.pyramid_dirs, config.public_base_url)
    logger.info("Indexed %d flex pyramid(s)", len(pyramids))

    app = FastAPI()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.state.config = config
    app.state.pyramids = pyramids

    app.include_router(create_pyramids_router(pyramids))

    @app.api_route("/pyramids/{pyramid_id}/{file_path:path}", methods=["GET", "HEAD"])
    def get_pyramid_file(pyramid_id: str, file_path: str):
        record = pyramids.get(pyramid_id)
        if not record:
            raise HTTPException(status_code=404, detail="Pyramid not found")
        path = _resolve_pyramid_file(record, file_path)
        return FileResponse(
            path,
            media_type=_content_type_for(path),
            headers={"Cache-Control": "public, max-age=86400"},
        )

    return app


def main() -> None:
    import uvicorn

    config = load_config()
    uvicorn.run(
        "web.server.main:create_app",
        host=config.host,
        port=config.port,
        factory=True,
    )


if __name__ == "__main__":
    main()
