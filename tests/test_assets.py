from __future__ import annotations

import pytest

from visualnovel.assets import (
    canonicalize_sprite_path,
    is_remote,
    normalize_asset_path,
    resolve_portrait_url,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("public/images/bg.png", "/images/bg.png"),
        ("/public/images/bg.png", "/images/bg.png"),
        ("images/bg.png", "/images/bg.png"),
        ("/images//backgrounds///bg.png", "/images/backgrounds/bg.png"),
        ("  /music/theme.mp3  ", "/music/theme.mp3"),
    ],
)
def test_normalize_asset_path(raw: str, expected: str) -> None:
    assert normalize_asset_path(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_normalize_asset_path_blank_input(raw: str | None) -> None:
    assert normalize_asset_path(raw) is None


def test_remote_urls_are_left_untouched() -> None:
    url = "https://cdn.example.com//images/bg.png"

    assert is_remote(url)
    assert is_remote("HTTP://example.com/a.png")
    assert not is_remote("/images/bg.png")
    assert normalize_asset_path(url) == url


def test_canonicalize_sprite_path_fixes_known_casing() -> None:
    assert canonicalize_sprite_path("/images/characters/bruno.png") == (
        "/images/characters/Bruno.png"
    )
    assert canonicalize_sprite_path("public/images/characters/LENA.png") == (
        "/images/characters/Lena.png"
    )
    assert canonicalize_sprite_path("/images/characters/adele.png") == (
        "/images/characters/Adel.png"
    )


def test_canonicalize_sprite_path_keeps_unknown_sprites() -> None:
    assert canonicalize_sprite_path("images/characters/ghost.webp") == (
        "/images/characters/ghost.webp"
    )
    assert canonicalize_sprite_path(None) is None


def test_resolve_portrait_url_prefers_sprite() -> None:
    assert resolve_portrait_url("otto", "/images/custom/otto.svg") == (
        "/images/custom/otto.svg"
    )


def test_resolve_portrait_url_falls_back_to_known_table() -> None:
    assert resolve_portrait_url("Otto", None) == "/images/characters/Otto.png"
    assert resolve_portrait_url("stranger", None) is None
