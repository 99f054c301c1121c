from __future__ import annotations

import logging
from pathlib import Path

import pytest

from visualnovel.settings import (
    DEFAULT_ASSET_ROOTS,
    DEFAULT_SCENE_ID,
    EngineSettings,
)


def test_from_env_defaults() -> None:
    settings = EngineSettings.from_env({})

    assert settings.content_dir is None
    assert settings.project_root == Path(".")
    assert settings.asset_roots == DEFAULT_ASSET_ROOTS
    assert settings.default_scene_id == DEFAULT_SCENE_ID
    assert settings.log_level == logging.WARNING


def test_from_env_reads_values(tmp_path: Path) -> None:
    settings = EngineSettings.from_env(
        {
            "VISUALNOVEL_CONTENT_DIR": f"  {tmp_path / 'content'}  ",
            "VISUALNOVEL_PROJECT_ROOT": str(tmp_path),
            "VISUALNOVEL_ASSET_ROOTS": "/images/, /sprites/ ,",
            "VISUALNOVEL_DEFAULT_SCENE": "chapter1:market",
            "VISUALNOVEL_LOG_LEVEL": "debug",
        }
    )

    assert settings.content_dir == tmp_path / "content"
    assert settings.project_root == tmp_path
    assert settings.asset_roots == ("/images/", "/sprites/")
    assert settings.default_scene_id == "chapter1:market"
    assert settings.log_level == logging.DEBUG


def test_blank_values_fall_back_to_defaults() -> None:
    settings = EngineSettings.from_env(
        {
            "VISUALNOVEL_CONTENT_DIR": "   ",
            "VISUALNOVEL_ASSET_ROOTS": " , ",
            "VISUALNOVEL_DEFAULT_SCENE": "",
            "VISUALNOVEL_LOG_LEVEL": "",
        }
    )

    assert settings.content_dir is None
    assert settings.asset_roots == DEFAULT_ASSET_ROOTS
    assert settings.default_scene_id == DEFAULT_SCENE_ID
    assert settings.log_level == logging.WARNING


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValueError):
        EngineSettings.from_env({"VISUALNOVEL_LOG_LEVEL": "loud"})


def test_asset_search_paths(tmp_path: Path) -> None:
    settings = EngineSettings(project_root=tmp_path)

    assert settings.asset_search_paths == (tmp_path / "public", tmp_path / "src")


def test_from_env_uses_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VISUALNOVEL_DEFAULT_SCENE", "intro:start")

    assert EngineSettings.from_env().default_scene_id == "intro:start"
