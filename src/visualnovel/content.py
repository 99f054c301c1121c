"""Loading authored chapter content and building registries from it."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

from .authoring import RawScene, parse_raw_scene
from .identifiers import ValidationError
from .registry import SceneRegistry
from .settings import EngineSettings

logger = logging.getLogger(__name__)

BUNDLED_CONTENT_PACKAGE = "visualnovel.data"


def load_chapter_from_mapping(definitions: Mapping[str, Any]) -> dict[str, RawScene]:
    """Parse a ``{scene_id: scene}`` mapping into raw scenes.

    A scene without an ``id`` takes its key; a scene whose ``id`` differs from
    its key is rejected.

    Raises:
        ValidationError: If a scene is malformed or its id disagrees with its
            key.
    """

    scenes: dict[str, RawScene] = {}
    for key, payload in definitions.items():
        if not isinstance(key, str):
            raise ValidationError("Scene keys must be strings.")
        scene = parse_raw_scene(payload, scene_id=key)
        if scene.id != key:
            raise ValidationError(
                f"Scene '{key}' declares a different id '{scene.id}'."
            )
        scenes[key] = scene
    return scenes


def _load_json_object(handle: Any, label: str) -> Mapping[str, Any]:
    try:
        raw_data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Chapter file '{label}' is not valid JSON: {exc}") from exc
    if not isinstance(raw_data, Mapping):
        raise ValidationError(
            f"Chapter file '{label}' must contain an object at the top level."
        )
    return raw_data


def load_chapter_from_file(path: str | Path) -> dict[str, RawScene]:
    """Load one chapter from a JSON file on disk."""

    data_path = Path(path)
    with data_path.open("r", encoding="utf-8") as handle:
        raw_data = _load_json_object(handle, str(data_path))
    return load_chapter_from_mapping(raw_data)


def load_chapters_from_directory(path: str | Path) -> dict[str, dict[str, RawScene]]:
    """Load every ``*.json`` file in ``path``; the file stem is the chapter id."""

    directory = Path(path)
    if not directory.is_dir():
        raise ValueError(f"Content directory '{directory}' does not exist.")

    chapters: dict[str, dict[str, RawScene]] = {}
    for chapter_file in sorted(directory.glob("*.json")):
        chapters[chapter_file.stem] = load_chapter_from_file(chapter_file)
    return chapters


def load_bundled_chapters() -> dict[str, dict[str, RawScene]]:
    """Read the demo chapters shipped inside the package."""

    chapters: dict[str, dict[str, RawScene]] = {}
    package_root = resources.files(BUNDLED_CONTENT_PACKAGE)
    entries = sorted(
        (entry for entry in package_root.iterdir() if entry.name.endswith(".json")),
        key=lambda entry: entry.name,
    )
    for entry in entries:
        with entry.open("r", encoding="utf-8") as handle:
            raw_data = _load_json_object(handle, entry.name)
        chapters[entry.name[: -len(".json")]] = load_chapter_from_mapping(raw_data)
    return chapters


def build_registry(
    chapters: Mapping[str, Mapping[str, RawScene | Mapping[str, Any]]],
) -> SceneRegistry:
    """Convert and register every chapter in ``chapters``."""

    registry = SceneRegistry()
    for chapter_id, scenes in chapters.items():
        registry.register_raw_chapter(chapter_id, scenes)
        logger.debug("Registered %d scenes for chapter '%s'.", len(scenes), chapter_id)
    return registry


def build_default_registry(settings: EngineSettings | None = None) -> SceneRegistry:
    """Build the registry from ``settings.content_dir`` or the bundled chapters."""

    resolved = settings or EngineSettings.from_env()
    if resolved.content_dir is not None:
        chapters = load_chapters_from_directory(resolved.content_dir)
    else:
        chapters = load_bundled_chapters()
    return build_registry(chapters)


__all__ = [
    "build_default_registry",
    "build_registry",
    "load_bundled_chapters",
    "load_chapter_from_file",
    "load_chapter_from_mapping",
    "load_chapters_from_directory",
]
