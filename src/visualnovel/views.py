"""Read-side helpers used by the renderer on every query."""

from __future__ import annotations

from typing import AbstractSet, Iterable

from .models import ChoiceView, FlagEffect, Line, SceneDefinition
from .registry import SceneRegistry

_VISITED_TRACKER_SUFFIX = "visited_any"


def _is_visit_tracker(flag: str) -> bool:
    return flag.lower().endswith(_VISITED_TRACKER_SUFFIX)


def build_choice_views(line: Line | None, flags: AbstractSet[str]) -> list[ChoiceView]:
    """Annotate the choices of ``line`` against the current flag state.

    A choice is locked when a required flag is missing, otherwise when a
    forbidding flag is set. It counts as visited when a forbidding flag is set
    or when one of its own flag-setting effects is already in place; generic
    ``*visited_any`` trackers do not count since they mark the scene rather
    than the choice.
    """

    if line is None or not line.choices:
        return []

    views: list[ChoiceView] = []
    for choice in line.choices:
        requirements = choice.requirements
        disabled = False
        lock_reason: str | None = None

        missing = [flag for flag in requirements.flags if flag not in flags]
        if missing:
            disabled = True
            lock_reason = f"Requires: {', '.join(missing)}"
        else:
            blocking = [flag for flag in requirements.not_flags if flag in flags]
            if blocking:
                disabled = True
                lock_reason = f"Unavailable while: {', '.join(blocking)}"

        visited_by_not_flags = any(flag in flags for flag in requirements.not_flags)
        visited_by_effects = any(
            isinstance(effect, FlagEffect)
            and effect.value is True
            and effect.flag in flags
            and not _is_visit_tracker(effect.flag)
            for effect in choice.effects
        )

        views.append(
            ChoiceView(
                choice=choice,
                disabled=disabled,
                lock_reason=lock_reason,
                is_visited=visited_by_not_flags or visited_by_effects,
            )
        )
    return views


def get_line_by_id(scene: SceneDefinition, line_id: str | None) -> Line | None:
    if not line_id:
        return None
    for line in scene.lines:
        if line.id == line_id:
            return line
    return None


def get_scene(
    registry: SceneRegistry,
    scene_id: str | None,
    *,
    default_scene_id: str | None = None,
) -> SceneDefinition | None:
    """Look up a scene for the renderer, falling back to the default scene."""

    if scene_id:
        scene = registry.get(scene_id)
        if scene is not None:
            return scene
    if default_scene_id:
        return registry.get(default_scene_id)
    return None


def iter_line_chain(scene: SceneDefinition) -> Iterable[Line]:
    """Yield the lines of ``scene`` by following ``next_line_id`` links."""

    by_id = {line.id: line for line in scene.lines}
    current = by_id.get(scene.entry_line_id)
    seen: set[str] = set()
    while current is not None and current.id not in seen:
        seen.add(current.id)
        yield current
        current = by_id.get(current.next_line_id) if current.next_line_id else None


__all__ = ["build_choice_views", "get_line_by_id", "get_scene", "iter_line_chain"]
