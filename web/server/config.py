from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ServerConfig:
    pyramid_dirs: list[Path]
    host: str = "0.0.0.0"
    port: int = 8000
    # Prefix for derived tile URLs, e.g. "https://tiles.example.org".
    # Empty keeps them host-relative ("/pyramids/...").
    public_base_url: str = ""


def _split_paths(value: str) -> list[Path]:
    parts = [part.strip() for part in value.split(os.pathsep) if part.strip()]
    return [Path(part).expanduser().resolve() for part in parts]


def _env_port(name: str, default: int) -> int:
    try:
        port = int(os.getenv(name, str(default)))
    except ValueError:
        return default
    return port if 0 < port < 65536 else default


def load_config() -> ServerConfig:
    pyramid_dirs = _split_paths(os.getenv("FLEXTILE_WEB_PYRAMID_DIRS", ""))
    return ServerConfig(
        pyramid_dirs=pyramid_dirs or [Path.cwd().resolve()],
        host=os.getenv("FLEXTILE_WEB_HOST", "0.0.0.0"),
        port=_env_port("FLEXTILE_WEB_PORT", 8000),
        public_base_url=os.getenv("FLEXTILE_WEB_BASE_URL", "").rstrip("/"),
    )
