"""Core package for the visual novel content engine."""

from .identifiers import (
    AmbiguousReferenceError,
    ValidationError,
    format_fqn,
    split_fqn,
)
from .models import (
    Character,
    CharacterAdvice,
    Choice,
    ChoiceRequirements,
    ChoiceView,
    Effect,
    FlagEffect,
    ImmediateEffect,
    Line,
    NarrativeEffect,
    RelationshipChangeEffect,
    SceneDefinition,
    SkillCheckRequirement,
    Transition,
    XpEffect,
)
from .authoring import RawChoice, RawScene, parse_raw_scene
from .assets import normalize_asset_path
from .speakers import SpeakerResolver
from .choices import compile_choice, normalize_skill_check_dc
from .converter import convert_scene
from .registry import SceneRegistry
from .content import (
    build_default_registry,
    build_registry,
    load_bundled_chapters,
    load_chapter_from_file,
    load_chapters_from_directory,
)
from .views import build_choice_views, get_line_by_id, get_scene
from .settings import EngineSettings
from .validator import ValidationReport, validate_registry

__all__ = [
    "AmbiguousReferenceError",
    "ValidationError",
    "format_fqn",
    "split_fqn",
    "Character",
    "CharacterAdvice",
    "Choice",
    "ChoiceRequirements",
    "ChoiceView",
    "Effect",
    "FlagEffect",
    "ImmediateEffect",
    "Line",
    "NarrativeEffect",
    "RelationshipChangeEffect",
    "SceneDefinition",
    "SkillCheckRequirement",
    "Transition",
    "XpEffect",
    "RawChoice",
    "RawScene",
    "parse_raw_scene",
    "normalize_asset_path",
    "SpeakerResolver",
    "compile_choice",
    "normalize_skill_check_dc",
    "convert_scene",
    "SceneRegistry",
    "build_default_registry",
    "build_registry",
    "load_bundled_chapters",
    "load_chapter_from_file",
    "load_chapters_from_directory",
    "build_choice_views",
    "get_line_by_id",
    "get_scene",
    "EngineSettings",
    "ValidationReport",
    "validate_registry",
]
