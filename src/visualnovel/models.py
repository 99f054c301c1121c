"""Runtime representation of converted visual-novel scenes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Union

Mood = Literal["neutral", "tense", "warm", "serious", "hopeful", "grim"]
Alignment = Literal["left", "right", "center"]
Tone = Literal["calm", "firm", "curious", "aggressive"]


@dataclass(frozen=True)
class FlagEffect:
    """Set (``value=True``) or clear (``value=False``) a narrative flag."""

    flag: str
    value: bool
    type: Literal["flag"] = field(default="flag", init=False)


@dataclass(frozen=True)
class XpEffect:
    amount: int | float
    type: Literal["xp"] = field(default="xp", init=False)


@dataclass(frozen=True)
class RelationshipChangeEffect:
    target_id: str
    delta: int | float
    type: Literal["relationship_change"] = field(
        default="relationship_change", init=False
    )


@dataclass(frozen=True)
class ImmediateEffect:
    """An action the game-state reducer performs as soon as the choice lands."""

    action: str
    data: Mapping[str, Any] | None = None
    type: Literal["immediate"] = field(default="immediate", init=False)

    def __post_init__(self) -> None:
        if self.data is not None:
            object.__setattr__(self, "data", dict(self.data))


@dataclass(frozen=True)
class NarrativeEffect:
    text: str
    type: Literal["narrative"] = field(default="narrative", init=False)


Effect = Union[
    FlagEffect, XpEffect, RelationshipChangeEffect, ImmediateEffect, NarrativeEffect
]


@dataclass(frozen=True)
class SkillCheckRequirement:
    """Normalised skill check attached to a choice.

    ``dc`` is always on the 5-95 scale; ``difficulty`` keeps the authored value
    so legacy content can still be displayed the way it was written.
    """

    skill: str
    difficulty: Any
    dc: int
    is_legacy: bool
    label: str
    success_text: str | None = None
    failure_text: str | None = None
    success_next_scene_id: str | None = None
    failure_next_scene_id: str | None = None
    success_effects: tuple[Effect, ...] = ()
    failure_effects: tuple[Effect, ...] = ()


@dataclass(frozen=True)
class ChoiceRequirements:
    flags: tuple[str, ...] = ()
    not_flags: tuple[str, ...] = ()
    skill_check: SkillCheckRequirement | None = None


@dataclass(frozen=True)
class Choice:
    id: str
    label: str
    description: str | None = None
    tone: Tone | None = None
    next_scene_id: str | None = None
    requirements: ChoiceRequirements = field(default_factory=ChoiceRequirements)
    effects: tuple[Effect, ...] = ()


@dataclass(frozen=True)
class ChoiceView:
    """A choice annotated against the current flag state."""

    choice: Choice
    disabled: bool = False
    lock_reason: str | None = None
    is_visited: bool = False

    @property
    def id(self) -> str:
        return self.choice.id

    @property
    def label(self) -> str:
        return self.choice.label


@dataclass(frozen=True)
class CharacterAdvice:
    character_id: str
    text: str
    mood: Mood = "neutral"
    stage_direction: str | None = None
    min_skill_level: int | float | None = None
    max_skill_level: int | float | None = None
    required_flags: tuple[str, ...] = ()
    excluded_flags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Transition:
    next_scene_id: str


@dataclass(frozen=True)
class Line:
    id: str
    text: str
    speaker_id: str | None = None
    mood: Mood = "neutral"
    background_override: str | None = None
    next_line_id: str | None = None
    choices: tuple[Choice, ...] = ()
    transition: Transition | None = None
    advices: tuple[CharacterAdvice, ...] = ()


@dataclass(frozen=True)
class Character:
    id: str
    name: str
    color: str
    alignment: Alignment = "center"
    portrait_url: str | None = None


@dataclass(frozen=True)
class SceneDefinition:
    """A converted scene ready to be registered and rendered."""

    id: str
    title: str
    location: str
    background: str
    entry_line_id: str
    lines: tuple[Line, ...]
    characters: tuple[Character, ...] = ()
    music: str | None = None
    ambient_color: str | None = None
    is_terminal: bool = False

    @property
    def terminal_line(self) -> Line:
        return self.lines[-1]


__all__ = [
    "Alignment",
    "Character",
    "CharacterAdvice",
    "Choice",
    "ChoiceRequirements",
    "ChoiceView",
    "Effect",
    "FlagEffect",
    "ImmediateEffect",
    "Line",
    "Mood",
    "NarrativeEffect",
    "RelationshipChangeEffect",
    "SceneDefinition",
    "SkillCheckRequirement",
    "Tone",
    "Transition",
    "XpEffect",
]
