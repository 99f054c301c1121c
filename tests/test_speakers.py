from __future__ import annotations

import pytest

from visualnovel.authoring import RawCharacter
from visualnovel.speakers import (
    COLOR_PALETTE,
    NARRATOR_ID,
    SpeakerResolver,
    hash_string,
    normalize_speaker_name,
    pick_color,
    slugify,
)


def _resolver() -> SpeakerResolver:
    return SpeakerResolver(
        [
            RawCharacter(id="lena", name="Lena"),
            RawCharacter(id="bruno", name="Bruno"),
        ]
    )


def test_hash_string_matches_rolling_32_bit_hash() -> None:
    assert hash_string("") == 0
    assert hash_string("a") == 97
    assert hash_string("ab") == 97 * 31 + 98
    assert hash_string("hello") == 99162322
    assert hash_string("polygenelubricants") == -(2**31)


def test_pick_color_uses_key_hash_or_index() -> None:
    assert pick_color(COLOR_PALETTE, 0, "ab") == COLOR_PALETTE[3105 % 6]
    assert pick_color(COLOR_PALETTE, 7) == COLOR_PALETTE[1]


def test_normalize_speaker_name_and_slugify() -> None:
    assert normalize_speaker_name("  Old   Man ") == "old man"
    assert slugify("Old Man!") == "old-man"
    assert slugify("Старый  Мельник") == "старый-мельник"
    assert slugify("???") == ""


def test_explicit_id_wins() -> None:
    assert _resolver().resolve("Lena", explicit_id="bruno") == "bruno"


@pytest.mark.parametrize("speaker", ["Narrator", "  NARRATOR ", "Рассказчик"])
def test_narrator_names_map_to_narrator(speaker: str) -> None:
    assert _resolver().resolve(speaker) == NARRATOR_ID


def test_exact_then_loose_match() -> None:
    resolver = _resolver()

    assert resolver.resolve("  lena ") == "lena"
    assert resolver.resolve("Bruno the baker") == "bruno"
    assert resolver.resolve("Len") == "lena"
    assert resolver.derived_characters() == ()


def test_missing_speaker_resolves_to_none() -> None:
    assert _resolver().resolve(None) is None
    assert _resolver().resolve("") is None


def test_unknown_speakers_are_derived_once() -> None:
    resolver = _resolver()

    first = resolver.resolve("Old Man", index=0)
    second = resolver.resolve("old   man", index=4)
    derived = resolver.derived_characters()

    assert first == "auto_old-man"
    assert second == "auto_old-man"
    assert len(derived) == 1
    assert derived[0].name == "Old Man"
    assert derived[0].alignment == "center"
    assert derived[0].color == pick_color(COLOR_PALETTE, 2, "Old Man")


def test_empty_slug_falls_back_to_index() -> None:
    resolver = _resolver()

    assert resolver.resolve("???", index=3) == "auto_3"


def test_derived_characters_are_deterministic() -> None:
    first = _resolver()
    second = _resolver()
    first.resolve("Conductor")
    second.resolve("Conductor")

    assert first.derived_characters() == second.derived_characters()


def test_resolver_refuses_new_speakers_after_flush() -> None:
    resolver = _resolver()
    resolver.resolve("Conductor")
    resolver.derived_characters()

    assert resolver.resolve("Conductor") == "auto_conductor"
    with pytest.raises(RuntimeError):
        resolver.resolve("Porter")


def test_lone_surrogates_are_hashed_as_code_units() -> None:
    assert hash_string("\ud800") == 0xD800

    resolver = SpeakerResolver([])
    assert resolver.resolve("\ud800x") == "auto_x"
    assert len(resolver.derived_characters()) == 1
