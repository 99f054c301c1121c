"""Conversion of authored scenes into runtime scene definitions."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping

from .assets import normalize_asset_path, resolve_portrait_url
from .authoring import RawAdvice, RawCharacter, RawScene, parse_raw_scene
from .choices import compile_choice
from .identifiers import (
    NAMESPACE_SEPARATOR,
    ValidationError,
    format_fqn,
    normalize_next_scene,
    split_fqn,
    validate_id,
)
from .models import (
    Alignment,
    Character,
    CharacterAdvice,
    Line,
    Mood,
    SceneDefinition,
    Transition,
)
from .speakers import COLOR_PALETTE, SpeakerResolver, pick_color

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "Freiburg"
DEFAULT_AMBIENT_COLOR = "rgba(2, 6, 23, 0.78)"

_MOODS_BY_EMOTION: dict[str, Mood] = {
    "neutral": "neutral",
    "tense": "tense",
    "worried": "tense",
    "anxious": "tense",
    "warm": "warm",
    "excited": "warm",
    "serious": "serious",
    "determined": "serious",
    "hopeful": "hopeful",
    "optimistic": "hopeful",
    "grim": "grim",
    "sad": "grim",
    "melancholy": "grim",
}


def line_id(fqn: str, index: int) -> str:
    return f"{fqn}__line{index}"


def normalize_mood(value: str | None) -> Mood:
    """Map an authored emotion onto one of the renderer's moods."""

    if not value:
        return "neutral"
    return _MOODS_BY_EMOTION.get(value.lower(), "neutral")


def format_title(scene_id: str) -> str:
    """``"arrival_at_station"`` becomes ``"Arrival At Station"``."""

    return " ".join(
        segment[:1].upper() + segment[1:] for segment in scene_id.split("_") if segment
    )


def _alignment(position: str | None) -> Alignment:
    if position in ("left", "right", "center"):
        return position  # type: ignore[return-value]
    return "center"


def convert_character(character: RawCharacter, index: int) -> Character:
    validate_id(character.id, f"character {character.id}")
    return Character(
        id=character.id,
        name=character.name,
        color=pick_color(COLOR_PALETTE, index, character.id),
        alignment=_alignment(character.position),
        portrait_url=resolve_portrait_url(character.id, character.sprite),
    )


def convert_advice(advice: RawAdvice) -> CharacterAdvice:
    return CharacterAdvice(
        character_id=advice.character_id,
        text=advice.text,
        mood=normalize_mood(advice.mood),
        stage_direction=advice.stage_direction,
        min_skill_level=advice.min_skill_level,
        max_skill_level=advice.max_skill_level,
        required_flags=tuple(advice.required_flags or ()),
        excluded_flags=tuple(advice.excluded_flags or ()),
    )


def _short_scene_id(chapter_id: str, scene_id: str) -> str:
    """Strip a ``chapter:`` prefix from ``scene_id`` and validate the rest."""

    namespace, short_id = split_fqn(scene_id)
    if namespace is not None and namespace != chapter_id:
        logger.warning(
            "Scene FQN '%s' mismatches conversion chapter '%s'.", scene_id, chapter_id
        )
    validate_id(short_id, f"scene definition {scene_id}")
    if NAMESPACE_SEPARATOR in short_id:
        raise ValidationError(
            f"Invalid ID in scene definition {scene_id}: only one "
            f"'{NAMESPACE_SEPARATOR}' namespace prefix is allowed."
        )
    return short_id


def convert_scene(
    chapter_id: str, scene: RawScene | Mapping[str, Any]
) -> SceneDefinition:
    """Convert one authored scene into a :class:`SceneDefinition`.

    The conversion is a pure function of its inputs: converting the same
    scene twice yields equal definitions, including derived character ids and
    colours.

    Raises:
        ValidationError: If the chapter id, scene id or any referenced id is
            malformed.
    """

    validate_id(chapter_id, "chapterId")
    raw = parse_raw_scene(scene)
    short_id = _short_scene_id(chapter_id, raw.id)

    fqn = format_fqn(chapter_id, short_id)
    speakers = SpeakerResolver(raw.characters)

    lines: list[Line] = []
    total = len(raw.dialogue)
    for index, entry in enumerate(raw.dialogue):
        background_override = normalize_asset_path(entry.background)
        lines.append(
            Line(
                id=line_id(fqn, index),
                text=entry.text,
                speaker_id=speakers.resolve(entry.speaker, entry.character_id, index),
                mood=normalize_mood(entry.emotion.primary if entry.emotion else None),
                background_override=background_override,
                next_line_id=line_id(fqn, index + 1) if index < total - 1 else None,
            )
        )

    if not lines:
        lines.append(Line(id=line_id(fqn, 0), text="", mood="neutral"))

    terminal = lines[-1]
    if raw.choices:
        terminal = replace(
            terminal, choices=tuple(compile_choice(choice) for choice in raw.choices)
        )
    elif raw.next_scene:
        next_scene_id = normalize_next_scene(raw.next_scene)
        if next_scene_id:
            terminal = replace(terminal, transition=Transition(next_scene_id))

    if raw.advices:
        terminal = replace(
            terminal, advices=tuple(convert_advice(advice) for advice in raw.advices)
        )
    lines[-1] = terminal

    characters = tuple(
        convert_character(character, index)
        for index, character in enumerate(raw.characters)
    ) + speakers.derived_characters()

    return SceneDefinition(
        id=fqn,
        title=raw.title or format_title(short_id),
        location=raw.location or DEFAULT_LOCATION,
        background=normalize_asset_path(raw.background) or "",
        music=normalize_asset_path(raw.music),
        ambient_color=DEFAULT_AMBIENT_COLOR,
        is_terminal=bool(raw.is_terminal),
        entry_line_id=lines[0].id,
        characters=characters,
        lines=tuple(lines),
    )


__all__ = [
    "DEFAULT_LOCATION",
    "convert_advice",
    "convert_character",
    "convert_scene",
    "format_title",
    "line_id",
    "normalize_mood",
]
