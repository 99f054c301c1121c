"""Tests for loading chapter content from files and package data."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from visualnovel.content import (
    build_default_registry,
    load_bundled_chapters,
    load_chapter_from_file,
    load_chapter_from_mapping,
    load_chapters_from_directory,
)
from visualnovel.identifiers import ValidationError
from visualnovel.settings import EngineSettings


def test_load_chapter_from_mapping_fills_missing_ids() -> None:
    scenes = load_chapter_from_mapping(
        {"start": {"dialogue": [{"speaker": "Lena", "text": "Hi."}], "nextScene": "END"}}
    )

    assert list(scenes) == ["start"]
    assert scenes["start"].id == "start"
    assert scenes["start"].next_scene == "END"
    assert scenes["start"].dialogue[0].speaker == "Lena"


def test_load_chapter_from_mapping_rejects_mismatched_id() -> None:
    with pytest.raises(ValidationError) as excinfo:
        load_chapter_from_mapping({"start": {"id": "other"}})

    assert "different id" in str(excinfo.value)


def test_load_chapter_from_mapping_rejects_non_objects() -> None:
    with pytest.raises(ValidationError):
        load_chapter_from_mapping({"start": ["not", "a", "scene"]})


def test_unknown_keys_are_ignored() -> None:
    scenes = load_chapter_from_mapping({"start": {"editorNotes": "draft", "isTerminal": True}})

    assert scenes["start"].is_terminal is True


def test_load_chapter_from_file(tmp_path: Path) -> None:
    path = tmp_path / "intro.json"
    path.write_text(json.dumps({"start": {"isTerminal": True}}), encoding="utf-8")

    assert list(load_chapter_from_file(path)) == ["start"]


def test_load_chapter_from_file_requires_an_object(tmp_path: Path) -> None:
    path = tmp_path / "intro.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_chapter_from_file(path)


def test_load_chapters_from_directory_uses_file_stems(tmp_path: Path) -> None:
    (tmp_path / "town.json").write_text(json.dumps({"square": {}}), encoding="utf-8")
    (tmp_path / "intro.json").write_text(json.dumps({"start": {}}), encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    chapters = load_chapters_from_directory(tmp_path)

    assert list(chapters) == ["intro", "town"]


def test_load_chapters_from_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_chapters_from_directory(tmp_path / "missing")


def test_bundled_chapters_are_available() -> None:
    chapters = load_bundled_chapters()

    assert set(chapters) == {"chapter1", "prologue"}
    assert "arrival" in chapters["prologue"]
    assert "exit_to_map" in chapters["chapter1"]


def test_default_registry_contains_default_scene() -> None:
    settings = EngineSettings()
    registry = build_default_registry(settings)

    scene = registry.resolve(None, settings.default_scene_id)
    assert scene is not None
    assert scene.title == "Arrival At The Station"
    assert registry.resolve(None, "exit_to_map") is registry.resolve(
        None, "chapter1:exit_to_map"
    )


def test_default_registry_reads_content_dir(tmp_path: Path) -> None:
    (tmp_path / "intro.json").write_text(json.dumps({"start": {}}), encoding="utf-8")

    registry = build_default_registry(EngineSettings(content_dir=tmp_path))

    assert registry.chapter_ids() == ("intro",)
