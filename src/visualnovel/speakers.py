"""Mapping free-text speaker names onto scene characters."""

from __future__ import annotations

import re
from typing import Sequence

from .authoring import RawCharacter
from .models import Character

COLOR_PALETTE: tuple[str, ...] = (
    "#7dd3fc",
    "#f97316",
    "#facc15",
    "#f472b6",
    "#a855f7",
    "#2dd4bf",
)

NARRATOR_ID = "narrator"
_NARRATOR_NAMES = frozenset({"рассказчик", "narrator"})

_WHITESPACE = re.compile(r"\s+")
_SLUG_DISALLOWED = re.compile(r"[^a-z0-9а-яё\s-]")


def normalize_speaker_name(value: str) -> str:
    return _WHITESPACE.sub(" ", value.strip().lower())


def slugify(value: str) -> str:
    cleaned = _SLUG_DISALLOWED.sub("", value.strip().lower())
    return _WHITESPACE.sub("-", cleaned)


def hash_string(value: str) -> int:
    """Return a signed 32-bit rolling hash of ``value``.

    The hash walks UTF-16 code units so colours stay identical to the ones the
    content was authored against. The built-in :func:`hash` is salted per
    process and cannot be used here.
    """

    encoded = value.encode("utf-16-le", "surrogatepass")
    result = 0
    for offset in range(0, len(encoded), 2):
        unit = encoded[offset] | (encoded[offset + 1] << 8)
        result = (result * 31 + unit) & 0xFFFFFFFF
    if result >= 0x80000000:
        result -= 0x100000000
    return result


def pick_color(palette: Sequence[str], index: int, key: str | None = None) -> str:
    """Choose a palette colour, keyed by ``key`` when given, else by ``index``."""

    if key:
        return palette[abs(hash_string(key)) % len(palette)]
    return palette[index % len(palette)]


class SpeakerResolver:
    """Resolve dialogue speakers for a single scene conversion.

    Speakers that match no authored character get a derived character with a
    stable ``auto_`` id. Derived characters accumulate on the resolver and are
    collected once via :meth:`derived_characters` when the scene is finished.
    """

    def __init__(
        self,
        characters: Sequence[RawCharacter],
        *,
        palette: Sequence[str] = COLOR_PALETTE,
    ) -> None:
        self._characters = tuple(characters)
        self._palette = tuple(palette)
        self._normalized_names = tuple(
            (normalize_speaker_name(character.name), character.id)
            for character in self._characters
        )
        self._derived: dict[str, Character] = {}
        self._flushed = False

    def resolve(
        self,
        speaker: str | None,
        explicit_id: str | None = None,
        index: int = 0,
    ) -> str | None:
        """Return the character id for a dialogue entry.

        Args:
            speaker: Display name as written by the author.
            explicit_id: Character id given directly on the entry; always wins.
            index: Position of the entry, used when the name yields no slug.
        """

        if explicit_id:
            return explicit_id
        if not speaker:
            return None

        normalized = normalize_speaker_name(speaker)
        if normalized in _NARRATOR_NAMES:
            return NARRATOR_ID

        for name, character_id in self._normalized_names:
            if name == normalized:
                return character_id

        for name, character_id in self._normalized_names:
            if name in normalized or normalized in name:
                return character_id

        slug = slugify(speaker)
        auto_id = f"auto_{slug or index}"
        if auto_id not in self._derived:
            if self._flushed:
                raise RuntimeError("SpeakerResolver was already flushed")
            self._derived[auto_id] = Character(
                id=auto_id,
                name=speaker,
                color=pick_color(
                    self._palette,
                    len(self._characters) + len(self._derived),
                    speaker,
                ),
                alignment="center",
            )
        return auto_id

    def derived_characters(self) -> tuple[Character, ...]:
        """Return the synthesised characters in the order they were created."""

        self._flushed = True
        return tuple(self._derived.values())


__all__ = [
    "COLOR_PALETTE",
    "NARRATOR_ID",
    "SpeakerResolver",
    "hash_string",
    "normalize_speaker_name",
    "pick_color",
    "slugify",
]
