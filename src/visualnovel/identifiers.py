"""Helpers for chapter/scene identifiers and the errors raised around them."""

from __future__ import annotations

from typing import Iterable

NAMESPACE_SEPARATOR = ":"
TERMINAL_MARKER = "END"
_TERMINAL_ALIASES = frozenset({"END", "EXIT", "EXIT_SCENE"})


class ValidationError(ValueError):
    """Raised when authored content violates identifier or structure rules."""


class AmbiguousReferenceError(LookupError):
    """Raised when an unqualified scene reference matches several chapters."""

    def __init__(self, target: str, chapters: Iterable[str]) -> None:
        self.target = target
        self.chapters: tuple[str, ...] = tuple(sorted(chapters))
        listed = ", ".join(self.chapters)
        suggestion = format_fqn(self.chapters[0], target) if self.chapters else target
        super().__init__(
            f"Ambiguous scene reference '{target}'. It exists in chapters: "
            f"[{listed}]. Use an explicit namespace (e.g. '{suggestion}')."
        )


def validate_id(value: str, scope: str) -> str:
    """Return ``value`` unchanged, raising when it contains a dot."""

    if not isinstance(value, str) or not value:
        raise ValidationError(f"Invalid ID in {scope}: {value!r}. IDs must be non-empty strings.")
    if "." in value:
        raise ValidationError(
            f"Invalid ID in {scope}: '{value}'. Dots are forbidden in IDs."
        )
    return value


def validate_scene_id(value: str) -> str:
    validate_id(value, "scene id")
    if value == TERMINAL_MARKER:
        raise ValidationError(
            f"Invalid scene id '{value}'. '{TERMINAL_MARKER}' is a reserved keyword."
        )
    if NAMESPACE_SEPARATOR in value:
        raise ValidationError(
            f"Invalid scene id '{value}'. Short scene ids cannot contain "
            f"'{NAMESPACE_SEPARATOR}'."
        )
    return value


def format_fqn(chapter_id: str, scene_id: str) -> str:
    """Join a chapter and a short scene id into a fully-qualified name."""

    return f"{chapter_id}{NAMESPACE_SEPARATOR}{scene_id}"


def is_qualified(value: str) -> bool:
    return NAMESPACE_SEPARATOR in value


def split_fqn(value: str) -> tuple[str | None, str]:
    """Split ``chapter:scene`` into its parts.

    Unqualified ids return ``(None, value)``. Only the first separator is
    significant.
    """

    if NAMESPACE_SEPARATOR not in value:
        return None, value
    chapter_id, scene_id = value.split(NAMESPACE_SEPARATOR, 1)
    return chapter_id, scene_id


def normalize_next_scene(target: str | None) -> str | None:
    """Normalise an authored scene target.

    Terminal aliases collapse onto :data:`TERMINAL_MARKER`; anything else is
    validated and returned as-is.
    """

    if not target:
        return None
    if target in _TERMINAL_ALIASES:
        return TERMINAL_MARKER
    validate_id(target, "nextScene reference")
    return target


__all__ = [
    "AmbiguousReferenceError",
    "NAMESPACE_SEPARATOR",
    "TERMINAL_MARKER",
    "ValidationError",
    "format_fqn",
    "is_qualified",
    "normalize_next_scene",
    "split_fqn",
    "validate_id",
    "validate_scene_id",
]
