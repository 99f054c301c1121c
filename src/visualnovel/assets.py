"""Canonicalisation of authored asset paths."""

from __future__ import annotations

import re

_REMOTE_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
_REPEATED_SLASHES = re.compile(r"/{2,}")

# Sprites that exist on disk with capitalised filenames while authors tend
# to reference them in lower case.
KNOWN_CHARACTER_SPRITES: dict[str, str] = {
    "bruno": "/images/characters/Bruno.png",
    "lena": "/images/characters/Lena.png",
    "otto": "/images/characters/Otto.png",
    "adel": "/images/characters/Adel.png",
    "adele": "/images/characters/Adel.png",
    "player": "/images/characters/Player.png",
}

_CANONICAL_SPRITE_PATHS: dict[str, str] = {
    f"/images/characters/{key}.png": path
    for key, path in KNOWN_CHARACTER_SPRITES.items()
}


def is_remote(path: str) -> bool:
    return bool(_REMOTE_PATTERN.match(path))


def normalize_asset_path(path: str | None) -> str | None:
    """Return a root-relative asset path, or ``None`` for blank input.

    ``public/`` prefixes are dropped because the web root already serves that
    directory, a leading slash is enforced and repeated slashes collapse.
    Remote URLs are returned untouched.
    """

    if not path:
        return None
    trimmed = path.strip()
    if not trimmed:
        return None
    if is_remote(trimmed):
        return trimmed

    normalized = trimmed
    if normalized.startswith("/public/"):
        normalized = "/" + normalized[len("/public/") :]
    elif normalized.startswith("public/"):
        normalized = "/" + normalized[len("public/") :]

    if not normalized.startswith("/"):
        normalized = "/" + normalized
    return _REPEATED_SLASHES.sub("/", normalized)


def canonicalize_sprite_path(path: str | None) -> str | None:
    """Normalise ``path`` and fix the casing of known character sprites."""

    normalized = normalize_asset_path(path)
    if normalized is None:
        return None
    return _CANONICAL_SPRITE_PATHS.get(normalized.lower(), normalized)


def resolve_portrait_url(character_id: str, sprite: str | None) -> str | None:
    """Pick a portrait for a character from its sprite or the known table."""

    from_sprite = canonicalize_sprite_path(sprite)
    if from_sprite:
        return from_sprite
    return KNOWN_CHARACTER_SPRITES.get(character_id.strip().lower())


__all__ = [
    "KNOWN_CHARACTER_SPRITES",
    "canonicalize_sprite_path",
    "is_remote",
    "normalize_asset_path",
    "resolve_portrait_url",
]
