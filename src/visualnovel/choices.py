"""Compilation of authored choices into runtime choices."""

from __future__ import annotations

import math
from typing import Iterable

from .authoring import RawBranchEffects, RawChoice, RawChoiceEffects
from .identifiers import normalize_next_scene, validate_id
from .models import (
    Choice,
    ChoiceRequirements,
    Effect,
    FlagEffect,
    ImmediateEffect,
    NarrativeEffect,
    RelationshipChangeEffect,
    SkillCheckRequirement,
    Tone,
    XpEffect,
)

DEFAULT_DC = 50
MIN_DC = 5
MAX_DC = 95
LEGACY_DIFFICULTY_LIMIT = 20
LEGACY_SCALE = 5
DESCRIPTION_SEPARATOR = " • "

_TONES_BY_COLOR: dict[str, Tone] = {
    "skill": "curious",
    "bold": "aggressive",
    "negative": "aggressive",
    "cautious": "calm",
}


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _clamp_dc(value: float) -> int:
    return max(MIN_DC, min(MAX_DC, _round_half_up(value)))


def normalize_skill_check_dc(raw_difficulty: object) -> tuple[int, bool]:
    """Return ``(dc, is_legacy)`` for an authored difficulty.

    Content predating the percentile scale used difficulties of 1-20; those
    are multiplied by five. Everything lands in ``[5, 95]`` and unusable input
    falls back to :data:`DEFAULT_DC`.
    """

    try:
        raw = float(raw_difficulty)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return DEFAULT_DC, False

    if not math.isfinite(raw) or raw <= 0:
        return DEFAULT_DC, False
    if raw <= LEGACY_DIFFICULTY_LIMIT:
        return _clamp_dc(raw * LEGACY_SCALE), True
    return _clamp_dc(raw), False


def build_skill_label(skill: str, difficulty: object, dc: int, is_legacy: bool) -> str:
    try:
        raw = _round_half_up(float(difficulty))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        raw = dc
    if is_legacy and dc != raw:
        return f"Check: {skill.upper()}{DESCRIPTION_SEPARATOR}Difficulty {raw} (DC {dc})"
    return f"Check: {skill.upper()}{DESCRIPTION_SEPARATOR}DC {dc}"


def map_tone(color: str | None) -> Tone | None:
    if color is None:
        return None
    return _TONES_BY_COLOR.get(color)


def consolidate_flags(effects: RawChoiceEffects | None) -> tuple[list[str], list[str]]:
    """Merge the three authored flag sources into ``(to_add, to_remove)``.

    Sources are processed in declaration order (``addFlags``, ``removeFlags``,
    keyed ``flags``). A flag lives in at most one of the two results; the last
    write for a key decides which. Both results keep first-insertion order.
    """

    to_add: dict[str, None] = {}
    to_remove: dict[str, None] = {}
    if effects is None:
        return [], []

    def _add(flag: str) -> None:
        to_add.setdefault(flag, None)
        to_remove.pop(flag, None)

    def _remove(flag: str) -> None:
        to_remove.setdefault(flag, None)
        to_add.pop(flag, None)

    for flag in effects.add_flags or ():
        if flag:
            _add(flag)
    for flag in effects.remove_flags or ():
        if flag:
            _remove(flag)
    for entry in effects.flags or ():
        if not entry.key:
            continue
        if entry.value is False:
            _remove(entry.key)
        else:
            _add(entry.key)

    return list(to_add), list(to_remove)


def _branch_flag_effects(branch: RawBranchEffects | None) -> tuple[Effect, ...]:
    if branch is None:
        return ()
    compiled: list[Effect] = [
        FlagEffect(flag=flag, value=True) for flag in branch.add_flags or () if flag
    ]
    compiled.extend(
        FlagEffect(flag=flag, value=False)
        for flag in branch.remove_flags or ()
        if flag
    )
    return tuple(compiled)


def compile_effects(effects: RawChoiceEffects | None) -> tuple[Effect, ...]:
    """Return the unconditional effect list in its fixed emission order."""

    if effects is None:
        return ()

    to_add, to_remove = consolidate_flags(effects)
    compiled: list[Effect] = [FlagEffect(flag=flag, value=True) for flag in to_add]
    compiled.extend(FlagEffect(flag=flag, value=False) for flag in to_remove)

    if effects.xp:
        compiled.append(XpEffect(amount=effects.xp))

    for reputation in effects.reputation or ():
        if reputation is None or not reputation.faction:
            continue
        compiled.append(
            RelationshipChangeEffect(
                target_id=reputation.faction, delta=reputation.delta or 0
            )
        )

    for immediate in effects.immediate or ():
        if immediate is None or not immediate.type:
            continue
        compiled.append(ImmediateEffect(action=immediate.type, data=immediate.data))

    if effects.narrative:
        compiled.append(NarrativeEffect(text=effects.narrative))

    return tuple(compiled)


def _collect(single: str | None, many: Iterable[str] | None) -> tuple[str, ...]:
    collected = [single] if single else []
    collected.extend(many or ())
    return tuple(collected)


def compile_choice(raw: RawChoice) -> Choice:
    """Normalise one authored choice into a runtime :class:`Choice`."""

    validate_id(raw.id, f"choice {raw.id}")

    availability = raw.availability
    skill_check = availability.skill_check if availability else None
    condition = availability.condition if availability else None
    effects = raw.effects
    on_success = effects.on_success if effects else None
    on_failure = effects.on_failure if effects else None

    segments: list[str] = []
    if raw.presentation and raw.presentation.tooltip:
        segments.append(raw.presentation.tooltip)
    if skill_check and skill_check.success_text:
        segments.append(f"Success: {skill_check.success_text}")
    if skill_check and skill_check.failure_text:
        segments.append(f"Failure: {skill_check.failure_text}")
    description = DESCRIPTION_SEPARATOR.join(segments) if segments else None

    direct_next = normalize_next_scene(raw.next_scene)
    success_next = normalize_next_scene(on_success.next_scene if on_success else None)
    failure_next = normalize_next_scene(on_failure.next_scene if on_failure else None)

    if skill_check is not None:
        next_scene_id = direct_next
    else:
        next_scene_id = success_next or direct_next or failure_next

    skill_requirement: SkillCheckRequirement | None = None
    if skill_check is not None:
        dc, is_legacy = normalize_skill_check_dc(skill_check.difficulty)
        skill_requirement = SkillCheckRequirement(
            skill=skill_check.skill,
            difficulty=skill_check.difficulty,
            dc=dc,
            is_legacy=is_legacy,
            label=build_skill_label(
                skill_check.skill, skill_check.difficulty, dc, is_legacy
            ),
            success_text=skill_check.success_text,
            failure_text=skill_check.failure_text,
            success_next_scene_id=success_next or direct_next,
            failure_next_scene_id=failure_next or direct_next,
            success_effects=_branch_flag_effects(on_success),
            failure_effects=_branch_flag_effects(on_failure),
        )

    requirements = ChoiceRequirements(
        flags=_collect(condition.flag, condition.flags) if condition else (),
        not_flags=_collect(condition.not_flag, condition.not_flags) if condition else (),
        skill_check=skill_requirement,
    )

    return Choice(
        id=raw.id,
        label=raw.text,
        description=description,
        tone=map_tone(raw.presentation.color if raw.presentation else None),
        next_scene_id=next_scene_id,
        requirements=requirements,
        effects=compile_effects(effects),
    )


__all__ = [
    "DEFAULT_DC",
    "build_skill_label",
    "compile_choice",
    "compile_effects",
    "consolidate_flags",
    "map_tone",
    "normalize_skill_check_dc",
]
