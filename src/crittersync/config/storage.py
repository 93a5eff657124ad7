"""Data storage configuration helpers."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var
from .errors import InaccessiblePathError

APP_DIR_NAME: Final[str] = "crittersync"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"
MACDIVE_DATABASE: Final[Path] = Path("MacDive") / "MacDive.sqlite"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    http_cache_filename: str = HTTP_CACHE_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.http_cache_filename


def platform_data_dir() -> Path:
    """Return the per-user data directory of the current platform."""

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        return Path(base) if base else (Path.home() / "AppData" / "Local")
    base = os.getenv("XDG_DATA_HOME")
    return Path(base) if base else (Path.home() / ".local" / "share")


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var("CRITTERSYNC_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else platform_data_dir() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def resolve_existing_path(path: Path | str | None, *, default: Path) -> Path:
    """Resolve ``path`` (or ``default`` when absent) and check that it exists."""

    candidate = Path(path).expanduser() if path is not None else default
    resolved = candidate.resolve()
    if not resolved.exists():
        raise InaccessiblePathError(resolved)
    return resolved


def resolve_macdive_database(path: Path | str | None = None) -> Path:
    """Locate the MacDive database, preferring an explicit path over the environment."""

    explicit = path if path is not None else optional_env_var("MACDIVE_DATABASE")
    return resolve_existing_path(explicit, default=platform_data_dir() / MACDIVE_DATABASE)
