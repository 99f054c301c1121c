"""Typed models for authored (raw) scene content.

Chapter content is written as nested literal data using camelCase keys, the
same shape authors use in the JSON chapter files. The models below accept
that shape (and snake_case field names, for Python callers) and ignore keys
they do not know about so editor metadata can travel alongside the content.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .identifiers import ValidationError

Number = int | float


class _AuthoringModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class RawEmotion(_AuthoringModel):
    primary: str | None = None
    intensity: Number | None = None


class RawCharacter(_AuthoringModel):
    id: str
    name: str
    position: str | None = None
    sprite: str | None = None
    emotion: RawEmotion | None = None


class RawDialogue(_AuthoringModel):
    text: str = ""
    speaker: str | None = None
    character_id: str | None = None
    emotion: RawEmotion | None = None
    background: str | None = None


class RawAdvice(_AuthoringModel):
    character_id: str
    text: str
    mood: str | None = None
    stage_direction: str | None = None
    min_skill_level: Number | None = None
    max_skill_level: Number | None = None
    required_flags: list[str] | None = None
    excluded_flags: list[str] | None = None


class RawSkillCheck(_AuthoringModel):
    skill: str
    difficulty: Any = None
    success_text: str | None = None
    failure_text: str | None = None


class RawCondition(_AuthoringModel):
    flag: str | None = None
    not_flag: str | None = None
    flags: list[str] | None = None
    not_flags: list[str] | None = None


class RawAvailability(_AuthoringModel):
    skill_check: RawSkillCheck | None = None
    condition: RawCondition | None = None


class RawPresentation(_AuthoringModel):
    color: str | None = None
    icon: str | None = None
    tooltip: str | None = None


class RawFlagEntry(_AuthoringModel):
    key: str | None = None
    value: bool | None = None


class RawReputationEntry(_AuthoringModel):
    faction: str | None = None
    delta: Number | None = None


class RawImmediateEntry(_AuthoringModel):
    type: str | None = None
    data: dict[str, Any] | None = None


class RawBranchEffects(_AuthoringModel):
    next_scene: str | None = None
    add_flags: list[str] | None = None
    remove_flags: list[str] | None = None


class RawChoiceEffects(_AuthoringModel):
    add_flags: list[str] | None = None
    remove_flags: list[str] | None = None
    flags: list[RawFlagEntry] | None = None
    immediate: list[RawImmediateEntry | None] | None = None
    narrative: str | None = None
    xp: Number | None = None
    reputation: list[RawReputationEntry | None] | None = None
    on_success: RawBranchEffects | None = None
    on_failure: RawBranchEffects | None = None


class RawChoice(_AuthoringModel):
    id: str
    text: str
    next_scene: str | None = None
    presentation: RawPresentation | None = None
    availability: RawAvailability | None = None
    effects: RawChoiceEffects | None = None


class RawScene(_AuthoringModel):
    id: str
    background: str | None = None
    music: str | None = None
    characters: list[RawCharacter] = Field(default_factory=list)
    dialogue: list[RawDialogue] = Field(default_factory=list)
    choices: list[RawChoice] | None = None
    next_scene: str | None = None
    advices: list[RawAdvice] | None = None
    is_terminal: bool | None = None
    title: str | None = None
    location: str | None = None


def parse_raw_scene(payload: RawScene | Mapping[str, Any], *, scene_id: str | None = None) -> RawScene:
    """Return ``payload`` as a :class:`RawScene`.

    Args:
        payload: An already-parsed scene or a mapping of authored data.
        scene_id: Identifier used to fill a missing ``id`` and to label errors.

    Raises:
        ValidationError: If the payload does not describe a scene.
    """

    if isinstance(payload, RawScene):
        return payload
    if not isinstance(payload, Mapping):
        label = scene_id or "<unknown>"
        raise ValidationError(f"Scene '{label}' must map to an object definition.")

    data = dict(payload)
    if scene_id is not None:
        data.setdefault("id", scene_id)

    try:
        return RawScene.model_validate(data)
    except PydanticValidationError as exc:
        label = data.get("id") or scene_id or "<unknown>"
        raise ValidationError(f"Scene '{label}' is malformed: {exc}") from exc


__all__ = [
    "RawAdvice",
    "RawAvailability",
    "RawBranchEffects",
    "RawCharacter",
    "RawChoice",
    "RawChoiceEffects",
    "RawCondition",
    "RawDialogue",
    "RawEmotion",
    "RawFlagEntry",
    "RawImmediateEntry",
    "RawPresentation",
    "RawReputationEntry",
    "RawScene",
    "RawSkillCheck",
    "parse_raw_scene",
]
