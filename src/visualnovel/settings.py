"""Configuration helpers for the scene engine and its tooling."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

DEFAULT_ASSET_ROOTS: tuple[str, ...] = ("/images/", "/video/", "/audio/", "/music/")
DEFAULT_ASSET_BASE_DIRS: tuple[str, ...] = ("public", "src")
DEFAULT_SCENE_ID = "prologue:arrival"


def _normalise_path(value: str | None) -> Path | None:
    if value is None:
        return None

    trimmed = value.strip()
    if not trimmed:
        return None

    return Path(trimmed).expanduser()


def _normalise_string(value: str | None, *, default: str) -> str:
    if value is None:
        return default

    trimmed = value.strip()
    return trimmed or default


def _normalise_list(value: str | None, *, default: tuple[str, ...]) -> tuple[str, ...]:
    if value is None:
        return default

    entries = tuple(entry.strip() for entry in value.split(",") if entry.strip())
    return entries or default


def _parse_log_level(value: str | None) -> int:
    if value is None or not value.strip():
        return logging.WARNING

    name = value.strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(
            f"VISUALNOVEL_LOG_LEVEL must be a logging level name, got '{value}'."
        )
    return level


@dataclass(frozen=True)
class EngineSettings:
    """Runtime settings shared by the registry loader, validator and API.

    Values are read from environment variables so content locations can be
    changed without touching code. Empty strings are treated as if the
    variable was unset.
    """

    content_dir: Path | None = None
    project_root: Path = Path(".")
    asset_roots: tuple[str, ...] = DEFAULT_ASSET_ROOTS
    asset_base_dirs: tuple[str, ...] = DEFAULT_ASSET_BASE_DIRS
    default_scene_id: str = DEFAULT_SCENE_ID
    log_level: int = logging.WARNING

    @property
    def asset_search_paths(self) -> tuple[Path, ...]:
        """Directories an asset path is looked up under, in order."""

        return tuple(self.project_root / base for base in self.asset_base_dirs)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineSettings":
        """Return settings populated from ``environ``.

        Args:
            environ: Optional mapping of environment variables. When omitted,
                :data:`os.environ` is used.

        Raises:
            ValueError: If ``VISUALNOVEL_LOG_LEVEL`` is not a known level.
        """

        source = environ if environ is not None else os.environ

        content_dir = _normalise_path(source.get("VISUALNOVEL_CONTENT_DIR"))
        project_root = _normalise_path(source.get("VISUALNOVEL_PROJECT_ROOT")) or Path(".")
        asset_roots = _normalise_list(
            source.get("VISUALNOVEL_ASSET_ROOTS"), default=DEFAULT_ASSET_ROOTS
        )
        default_scene_id = _normalise_string(
            source.get("VISUALNOVEL_DEFAULT_SCENE"), default=DEFAULT_SCENE_ID
        )
        log_level = _parse_log_level(source.get("VISUALNOVEL_LOG_LEVEL"))

        return cls(
            content_dir=content_dir,
            project_root=project_root,
            asset_roots=asset_roots,
            default_scene_id=default_scene_id,
            log_level=log_level,
        )


__all__ = ["EngineSettings"]
