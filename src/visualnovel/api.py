"""FastAPI application exposing converted scenes to the renderer."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Literal

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from .content import build_default_registry
from .identifiers import AmbiguousReferenceError
from .models import ChoiceView, SceneDefinition
from .registry import SceneRegistry
from .settings import EngineSettings
from .validator import validate_registry
from .views import build_choice_views, get_line_by_id, get_scene


class SceneSummary(BaseModel):
    """Lightweight representation of a scene for overview lists."""

    id: str
    title: str
    location: str
    line_count: int
    is_terminal: bool


class SceneListResponse(BaseModel):
    data: list[SceneSummary]


class ChoiceViewResource(BaseModel):
    """A choice annotated against the flags supplied with the request."""

    id: str
    label: str
    description: str | None = None
    tone: str | None = None
    next_scene_id: str | None = None
    requirements: dict[str, Any] = Field(default_factory=dict)
    effects: list[dict[str, Any]] = Field(default_factory=list)
    disabled: bool
    lock_reason: str | None = None
    is_visited: bool


class ChoiceViewListResponse(BaseModel):
    scene_id: str
    line_id: str
    data: list[ChoiceViewResource]


class ValidationIssueResource(BaseModel):
    severity: Literal["error", "warning"]
    scene_id: str
    message: str


class ValidationResponse(BaseModel):
    scene_count: int
    error_count: int
    warning_count: int
    issues: list[ValidationIssueResource]


def _choice_view_resource(view: ChoiceView) -> ChoiceViewResource:
    choice = asdict(view.choice)
    return ChoiceViewResource(
        id=choice["id"],
        label=choice["label"],
        description=choice["description"],
        tone=choice["tone"],
        next_scene_id=choice["next_scene_id"],
        requirements=choice["requirements"],
        effects=choice["effects"],
        disabled=view.disabled,
        lock_reason=view.lock_reason,
        is_visited=view.is_visited,
    )


def create_app(
    registry: SceneRegistry | None = None,
    *,
    settings: EngineSettings | None = None,
) -> FastAPI:
    """Create a FastAPI app serving scenes from ``registry``."""

    resolved_settings = settings or EngineSettings.from_env()
    scenes = registry if registry is not None else build_default_registry(resolved_settings)

    app = FastAPI(title="Visual Novel Scene Service")

    def _lookup(scene_id: str) -> SceneDefinition:
        try:
            scene = scenes.resolve(None, scene_id)
        except AmbiguousReferenceError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        if scene is None:
            raise HTTPException(status_code=404, detail=f"Scene '{scene_id}' not found.")
        return scene

    @app.get("/scenes", response_model=SceneListResponse)
    def list_scenes() -> SceneListResponse:
        flat = scenes.get_all_scenes_flat()
        return SceneListResponse(
            data=[
                SceneSummary(
                    id=fqn,
                    title=scene.title,
                    location=scene.location,
                    line_count=len(scene.lines),
                    is_terminal=scene.is_terminal,
                )
                for fqn, scene in sorted(flat.items())
            ]
        )

    @app.get("/scenes/{scene_id}")
    def read_scene(scene_id: str) -> dict[str, Any]:
        return asdict(_lookup(scene_id))

    @app.get("/entry")
    def read_entry_scene(scene_id: str | None = None) -> dict[str, Any]:
        # Unknown or missing ids fall back to the configured default scene.
        scene = get_scene(
            scenes, scene_id, default_scene_id=resolved_settings.default_scene_id
        )
        if scene is None:
            raise HTTPException(status_code=404, detail="No entry scene is registered.")
        return asdict(scene)

    @app.get(
        "/scenes/{scene_id}/lines/{line_id}/choices",
        response_model=ChoiceViewListResponse,
    )
    def read_choice_views(
        scene_id: str,
        line_id: str,
        flag: list[str] | None = Query(default=None),
    ) -> ChoiceViewListResponse:
        scene = _lookup(scene_id)
        line = get_line_by_id(scene, line_id)
        if line is None:
            raise HTTPException(
                status_code=404,
                detail=f"Line '{line_id}' not found in scene '{scene.id}'.",
            )
        views = build_choice_views(line, frozenset(flag or ()))
        return ChoiceViewListResponse(
            scene_id=scene.id,
            line_id=line.id,
            data=[_choice_view_resource(view) for view in views],
        )

    @app.get("/validation", response_model=ValidationResponse)
    def read_validation() -> ValidationResponse:
        report = validate_registry(scenes, resolved_settings)
        return ValidationResponse(
            scene_count=report.scene_count,
            error_count=len(report.errors),
            warning_count=len(report.warnings),
            issues=[
                ValidationIssueResource(
                    severity=issue.severity,
                    scene_id=issue.scene_id,
                    message=issue.message,
                )
                for issue in report.issues
            ],
        )

    return app


__all__ = ["create_app"]
