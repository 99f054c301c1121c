"""Test configuration for the visual novel project."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from typing import Any, Callable

import pytest

from visualnovel.content import build_registry
from visualnovel.registry import SceneRegistry


def _sample_chapters() -> dict[str, dict[str, Any]]:
    return {
        "intro": {
            "start": {
                "background": "/images/backgrounds/start.svg",
                "characters": [{"id": "lena", "name": "Lena"}],
                "dialogue": [
                    {"speaker": "Narrator", "text": "Rain hammers the platform."},
                    {"speaker": "Lena", "text": "Over here!"},
                ],
                "choices": [
                    {"id": "follow", "text": "Follow Lena", "nextScene": "hall"},
                    {"id": "leave", "text": "Leave", "nextScene": "END"},
                ],
            },
            "hall": {
                "dialogue": [{"text": "An empty hall."}],
                "nextScene": "town:square",
            },
        },
        "town": {
            "square": {
                "dialogue": [{"text": "The town square."}],
                "isTerminal": True,
            },
        },
    }


@pytest.fixture()
def sample_chapters() -> dict[str, dict[str, Any]]:
    """Return a small, fully linked two-chapter content set."""

    return _sample_chapters()


@pytest.fixture()
def sample_registry() -> SceneRegistry:
    return build_registry(_sample_chapters())


@pytest.fixture()
def write_assets(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture creating empty asset files under ``tmp_path``."""

    def _factory(*relative_paths: str) -> Path:
        for relative in relative_paths:
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("", encoding="utf-8")
        return tmp_path

    return _factory


__all__ = ["ROOT", "sample_chapters", "sample_registry", "write_assets"]
