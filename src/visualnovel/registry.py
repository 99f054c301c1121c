"""Namespaced storage and reference resolution for converted scenes."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .authoring import RawScene, parse_raw_scene
from .converter import convert_scene
from .identifiers import (
    TERMINAL_MARKER,
    AmbiguousReferenceError,
    format_fqn,
    split_fqn,
    validate_id,
    validate_scene_id,
)
from .models import SceneDefinition

logger = logging.getLogger(__name__)


class SceneRegistry:
    """Scenes grouped by chapter, with a global index of short scene ids.

    A registry is built once at start-up and then only read. It is passed to
    the renderer, the validator and tests explicitly so each of them can work
    with an isolated instance.
    """

    def __init__(self) -> None:
        self._chapters: dict[str, dict[str, SceneDefinition]] = {}
        self._global_index: dict[str, set[str]] = {}

    def __len__(self) -> int:
        return sum(len(scenes) for scenes in self._chapters.values())

    def __contains__(self, scene_id: object) -> bool:
        if not isinstance(scene_id, str):
            return False
        chapter_id, short_id = split_fqn(scene_id)
        if chapter_id is None:
            return short_id in self._global_index
        return short_id in self._chapters.get(chapter_id, {})

    def chapter_ids(self) -> tuple[str, ...]:
        return tuple(self._chapters)

    def chapter(self, chapter_id: str) -> Mapping[str, SceneDefinition]:
        """Return a read-only view of one chapter's scenes keyed by short id."""

        return MappingProxyType(self._chapters.get(chapter_id, {}))

    def register_chapter(
        self, chapter_id: str, scenes: Iterable[SceneDefinition]
    ) -> None:
        """Register converted scenes under ``chapter_id``.

        Scene ids may already be fully qualified; the namespace is stripped
        (with a warning when it names another chapter). Registering a short id
        twice in the same chapter replaces the earlier scene.

        Raises:
            ValidationError: If the chapter id or a scene id is malformed.
        """

        validate_id(chapter_id, "chapterId")
        chapter_map = self._chapters.setdefault(chapter_id, {})

        for scene in scenes:
            namespace, short_id = split_fqn(scene.id)
            if namespace is not None and namespace != chapter_id:
                logger.warning(
                    "Scene FQN '%s' mismatches registration chapter '%s'.",
                    scene.id,
                    chapter_id,
                )

            validate_scene_id(short_id)

            if short_id in chapter_map:
                logger.warning(
                    "Duplicate scene id '%s' in chapter '%s'. Overwriting.",
                    short_id,
                    chapter_id,
                )

            chapter_map[short_id] = scene
            self._global_index.setdefault(short_id, set()).add(chapter_id)

    def register_raw_chapter(
        self,
        chapter_id: str,
        scenes: Mapping[str, RawScene | Mapping[str, Any]] | Iterable[RawScene],
    ) -> list[SceneDefinition]:
        """Convert authored scenes and register them under ``chapter_id``."""

        if isinstance(scenes, Mapping):
            raw_scenes = [
                parse_raw_scene(payload, scene_id=key) for key, payload in scenes.items()
            ]
        else:
            raw_scenes = list(scenes)
        converted = [convert_scene(chapter_id, scene) for scene in raw_scenes]
        self.register_chapter(chapter_id, converted)
        return converted

    def resolve(
        self, current_chapter_id: str | None, target: str | None
    ) -> SceneDefinition | None:
        """Resolve ``target`` to a scene.

        Precedence: an explicit ``chapter:scene`` only looks in that chapter;
        an unqualified id is looked up in ``current_chapter_id`` first and then
        in the global index, where it must be unique.

        Returns:
            The scene, or ``None`` for ``END``, empty or unknown targets.

        Raises:
            AmbiguousReferenceError: If an unqualified id did not resolve
                locally and exists in more than one chapter.
        """

        if not target or target == TERMINAL_MARKER:
            return None

        namespace, short_id = split_fqn(target)
        if namespace is not None:
            return self._chapters.get(namespace, {}).get(short_id)

        if current_chapter_id:
            local = self._chapters.get(current_chapter_id, {}).get(target)
            if local is not None:
                return local

        containing = self._global_index.get(target)
        if not containing:
            return None
        if len(containing) > 1:
            raise AmbiguousReferenceError(target, containing)

        (only_chapter,) = containing
        return self._chapters[only_chapter].get(target)

    def get_chapter_id(self, scene_id: str) -> str | None:
        """Return the owning chapter of ``scene_id`` when it is unambiguous."""

        namespace, short_id = split_fqn(scene_id)
        if namespace is not None:
            return namespace

        containing = self._global_index.get(short_id)
        if not containing or len(containing) > 1:
            return None
        return next(iter(containing))

    def get(self, scene_id: str | None) -> SceneDefinition | None:
        """Context-free lookup that logs ambiguity instead of raising."""

        try:
            return self.resolve(None, scene_id)
        except AmbiguousReferenceError as exc:
            logger.warning("%s", exc)
            return None

    def resolve_navigation(
        self, from_scene_id: str, target: str | None
    ) -> SceneDefinition | None:
        """Resolve ``target`` as seen from the scene ``from_scene_id``."""

        return self.resolve(self.get_chapter_id(from_scene_id), target)

    def get_all_scenes_flat(self) -> dict[str, SceneDefinition]:
        """Return every registered scene keyed by its fully-qualified id."""

        flat: dict[str, SceneDefinition] = {}
        for chapter_id, chapter_map in self._chapters.items():
            for short_id, scene in chapter_map.items():
                flat[format_fqn(chapter_id, short_id)] = scene
        return flat


__all__ = ["SceneRegistry"]
