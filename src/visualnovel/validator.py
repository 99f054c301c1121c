"""Offline validation of the registered scene graph.

The validator walks every registered scene, checks referenced asset files,
flags dead ends and verifies that every navigation target resolves. Issues
are collected across the whole pass so authors see every defect from one
run::

    python -m visualnovel.validator
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Literal, Sequence

from .content import build_default_registry
from .identifiers import TERMINAL_MARKER, AmbiguousReferenceError, ValidationError
from .models import SceneDefinition
from .registry import SceneRegistry
from .settings import EngineSettings
from .views import iter_line_chain

logger = logging.getLogger(__name__)

Severity = Literal["error", "warning"]


@dataclass(frozen=True)
class ValidationIssue:
    severity: Severity
    scene_id: str
    message: str


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of a validation pass over the registry."""

    scene_count: int
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def errors(self) -> tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if issue.severity == "warning")

    @property
    def has_errors(self) -> bool:
        """Return ``True`` when at least one error was recorded."""

        return bool(self.errors)


@dataclass
class GraphValidator:
    """Collects asset, dead-end and link issues for a registry."""

    registry: SceneRegistry
    settings: EngineSettings = field(default_factory=EngineSettings)
    _issues: list[ValidationIssue] = field(default_factory=list, init=False)

    def run(self) -> ValidationReport:
        self._issues = []
        scenes = self.registry.get_all_scenes_flat()
        for fqn in sorted(scenes):
            self.validate_scene(fqn, scenes[fqn])
        return ValidationReport(scene_count=len(scenes), issues=tuple(self._issues))

    def validate_scene(self, scene_id: str, scene: SceneDefinition) -> None:
        self._check_asset(scene_id, scene.background)
        self._check_asset(scene_id, scene.music)
        for character in scene.characters:
            self._check_asset(scene_id, character.portrait_url)

        chained = [line.id for line in iter_line_chain(scene)]
        if len(chained) != len(scene.lines) or (
            chained and chained[-1] != scene.terminal_line.id
        ):
            self._error(
                scene_id,
                f"Broken line chain: {len(chained)} of {len(scene.lines)} lines "
                f"reachable from '{scene.entry_line_id}'.",
            )

        terminal = scene.terminal_line
        next_scene_id = terminal.transition.next_scene_id if terminal.transition else None

        if not terminal.choices and not next_scene_id and not scene.is_terminal:
            self._error(
                scene_id,
                "Dead end detected: scene has no choices and no nextScene. "
                "Mark it terminal or add a transition.",
            )
        elif next_scene_id:
            self._check_link(scene_id, next_scene_id, "Broken link to nextScene")

        for choice in terminal.choices:
            if choice.next_scene_id:
                self._check_link(
                    scene_id,
                    choice.next_scene_id,
                    f"Broken link in choice '{choice.label}'",
                )
            skill_check = choice.requirements.skill_check
            if skill_check is None:
                continue
            for branch, target in (
                ("success", skill_check.success_next_scene_id),
                ("failure", skill_check.failure_next_scene_id),
            ):
                if target and target != choice.next_scene_id:
                    self._check_link(
                        scene_id,
                        target,
                        f"Broken {branch} link in choice '{choice.label}'",
                    )

    def _check_asset(self, scene_id: str, asset_path: str | None) -> None:
        if not asset_path or asset_path.startswith("http"):
            return
        if not any(asset_path.startswith(root) for root in self.settings.asset_roots):
            self._warning(
                scene_id, f"Asset outside known roots was not checked: {asset_path}"
            )
            return

        relative = asset_path.lstrip("/")
        search_paths = self.settings.asset_search_paths
        if any((base / relative).exists() for base in search_paths):
            return

        checked = ", ".join(f"{Path(base).name}/" for base in search_paths)
        self._error(scene_id, f"Missing asset: {asset_path} (checked {checked})")

    def _check_link(self, scene_id: str, target: str, label: str) -> None:
        if target == TERMINAL_MARKER:
            return
        try:
            resolved = self.registry.resolve_navigation(scene_id, target)
        except AmbiguousReferenceError as exc:
            self._error(scene_id, f"{label}: {exc}")
            return
        if resolved is None:
            self._error(scene_id, f'{label}: "{target}"')

    def _error(self, scene_id: str, message: str) -> None:
        logger.debug("[%s] %s", scene_id, message)
        self._issues.append(ValidationIssue("error", scene_id, message))

    def _warning(self, scene_id: str, message: str) -> None:
        self._issues.append(ValidationIssue("warning", scene_id, message))


def validate_registry(
    registry: SceneRegistry, settings: EngineSettings | None = None
) -> ValidationReport:
    """Validate ``registry`` and return the collected report."""

    return GraphValidator(registry, settings or EngineSettings()).run()


def format_validation_report(report: ValidationReport) -> str:
    """Return a human-friendly summary of ``report``."""

    lines = [
        "Scene Graph Validation",
        "======================",
        f"Checked {report.scene_count} scenes.",
        f"Errors: {len(report.errors)}",
        f"Warnings: {len(report.warnings)}",
    ]

    if report.errors:
        lines.append("")
        lines.append("--- ERRORS ---")
        lines.extend(f"[{issue.scene_id}] {issue.message}" for issue in report.errors)

    if report.warnings:
        lines.append("")
        lines.append("--- WARNINGS ---")
        lines.extend(f"[{issue.scene_id}] {issue.message}" for issue in report.warnings)

    if not report.has_errors:
        lines.append("")
        lines.append("Validation passed.")

    return "\n".join(lines)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Validate registered visual-novel scenes for missing assets, dead "
            "ends and broken links."
        )
    )
    parser.add_argument(
        "--content-dir",
        type=Path,
        help=(
            "Directory of chapter JSON files. Defaults to VISUALNOVEL_CONTENT_DIR "
            "or the bundled demo chapters."
        ),
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        help=(
            "Directory containing public/ and src/ asset folders. Defaults to "
            "VISUALNOVEL_PROJECT_ROOT or the current directory."
        ),
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by ``python -m visualnovel.validator``."""

    args = _parse_args(argv)
    try:
        settings = EngineSettings.from_env()
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.content_dir is not None:
        settings = replace(settings, content_dir=args.content_dir)
    if args.project_root is not None:
        settings = replace(settings, project_root=args.project_root)

    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        registry = build_default_registry(settings)
    except (ValidationError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    report = validate_registry(registry, settings)
    print(format_validation_report(report))
    if report.has_errors:
        print(
            f"error: validation failed with {len(report.errors)} error(s)",
            file=sys.stderr,
        )
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - convenience CLI
    raise SystemExit(main())
