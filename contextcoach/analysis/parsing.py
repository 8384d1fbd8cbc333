"""Parse LLM replies into typed records, substituting fallbacks on failure.

Models regularly answer with prose, code fences or half-formed JSON. Rather
than failing the user-visible operation, a reply that cannot be decoded as a
JSON object of the expected shape is replaced by a fixed fallback record for
the task and a warning is logged.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..models import ComplexityLevel

logger = logging.getLogger(__name__)


class TaskKind(str, Enum):
    AMBIGUITY = "ambiguity"
    SCOPE = "scope"
    PLAN = "plan"
    STORY_POINTS = "story_points"
    COMPLEXITY = "complexity"
    REPOSITORY = "repository"


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _opt_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("Expected a number, got a boolean")
    return float(value)


def _opt_int(value: Any) -> Optional[int]:
    number = _opt_float(value)
    return None if number is None else int(round(number))


def _opt_level(value: Any) -> Optional[ComplexityLevel]:
    return None if value is None else ComplexityLevel.coerce(value)


def _as_list(value: Any) -> List[str]:
    """Coerce a scalar into a one-element list; keep lists as lists of text."""
    if value is None:
        return []
    if isinstance(value, list):
        return [item if isinstance(item, str) else str(item) for item in value]
    return [value if isinstance(value, str) else str(value)]


def _level_value(level: Optional[ComplexityLevel]) -> Optional[str]:
    return level.value if level is not None else None


@dataclass
class AmbiguityReport:
    ambiguity_categories: List[str] = field(default_factory=list)
    analysis: Optional[str] = None
    confidence_score: Optional[float] = None
    suggested_improvements: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AmbiguityReport":
        return cls(
            ambiguity_categories=_as_list(data.get("ambiguityCategories")),
            analysis=_opt_str(data.get("analysis")),
            confidence_score=_opt_float(data.get("confidenceScore")),
            suggested_improvements=_opt_str(data.get("suggestedImprovements")),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ambiguityCategories": list(self.ambiguity_categories),
            "analysis": self.analysis,
            "confidenceScore": self.confidence_score,
            "suggestedImprovements": self.suggested_improvements,
        }


@dataclass
class ScopeEstimate:
    estimated_hours: Optional[float] = None
    complexity_level: Optional[ComplexityLevel] = None
    confidence_level: Optional[float] = None
    justification: Optional[str] = None
    risk_factors: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ScopeEstimate":
        return cls(
            estimated_hours=_opt_float(data.get("estimatedHours")),
            complexity_level=_opt_level(data.get("complexityLevel")),
            confidence_level=_opt_float(data.get("confidenceLevel")),
            justification=_opt_str(data.get("justification")),
            risk_factors=_opt_str(data.get("riskFactors")),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "estimatedHours": self.estimated_hours,
            "complexityLevel": _level_value(self.complexity_level),
            "confidenceLevel": self.confidence_level,
            "justification": self.justification,
            "riskFactors": self.risk_factors,
        }


@dataclass
class PlanDraft:
    summary: Optional[str] = None
    implementation_steps: List[str] = field(default_factory=list)
    technical_approach: Optional[str] = None
    dependencies: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PlanDraft":
        return cls(
            summary=_opt_str(data.get("summary")),
            implementation_steps=_as_list(data.get("implementationSteps")),
            technical_approach=_opt_str(data.get("technicalApproach")),
            dependencies=_opt_str(data.get("dependencies")),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "implementationSteps": list(self.implementation_steps),
            "technicalApproach": self.technical_approach,
            "dependencies": self.dependencies,
        }


@dataclass
class StoryPointEstimate:
    story_points: Optional[int] = None
    complexity: Optional[ComplexityLevel] = None
    confidence_level: Optional[float] = None
    justification: Optional[str] = None
    considerations: List[str] = field(default_factory=list)
    developer_factors: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "StoryPointEstimate":
        return cls(
            story_points=_opt_int(data.get("storyPoints")),
            complexity=_opt_level(data.get("complexity")),
            confidence_level=_opt_float(data.get("confidenceLevel")),
            justification=_opt_str(data.get("justification")),
            considerations=_as_list(data.get("considerations")),
            developer_factors=_opt_str(data.get("developerFactors")),
        )

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "storyPoints": self.story_points,
            "complexity": _level_value(self.complexity),
            "confidenceLevel": self.confidence_level,
            "justification": self.justification,
            "considerations": list(self.considerations),
        }
        if self.developer_factors is not None:
            data["developerFactors"] = self.developer_factors
        return data


@dataclass
class ComplexityReport:
    complexity: Optional[str] = None
    story_points: Optional[int] = None
    affected_modules: List[str] = field(default_factory=list)
    subtasks: List[str] = field(default_factory=list)
    refactors: List[str] = field(default_factory=list)
    risks: List[str] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ComplexityReport":
        return cls(
            complexity=_opt_str(data.get("complexity")),
            story_points=_opt_int(data.get("storyPoints")),
            affected_modules=_as_list(data.get("affectedModules")),
            subtasks=_as_list(data.get("subtasks")),
            refactors=_as_list(data.get("refactors")),
            risks=_as_list(data.get("risks")),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "complexity": self.complexity,
            "storyPoints": self.story_points,
            "affectedModules": list(self.affected_modules),
            "subtasks": list(self.subtasks),
            "refactors": list(self.refactors),
            "risks": list(self.risks),
        }


@dataclass
class RepositoryAnalysis:
    complexity_score: Optional[float] = None
    code_quality_assessment: Optional[str] = None
    suggested_improvements: Optional[str] = None
    potential_issues: List[str] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RepositoryAnalysis":
        return cls(
            complexity_score=_opt_float(data.get("complexityScore")),
            code_quality_assessment=_opt_str(data.get("codeQualityAssessment")),
            suggested_improvements=_opt_str(data.get("suggestedImprovements")),
            potential_issues=_as_list(data.get("potentialIssues")),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "complexityScore": self.complexity_score,
            "codeQualityAssessment": self.code_quality_assessment,
            "suggestedImprovements": self.suggested_improvements,
            "potentialIssues": list(self.potential_issues),
        }


StructuredRecord = Union[
    AmbiguityReport,
    ScopeEstimate,
    PlanDraft,
    StoryPointEstimate,
    ComplexityReport,
    RepositoryAnalysis,
]

RECORD_TYPES: Dict[TaskKind, Any] = {
    TaskKind.AMBIGUITY: AmbiguityReport,
    TaskKind.SCOPE: ScopeEstimate,
    TaskKind.PLAN: PlanDraft,
    TaskKind.STORY_POINTS: StoryPointEstimate,
    TaskKind.COMPLEXITY: ComplexityReport,
    TaskKind.REPOSITORY: RepositoryAnalysis,
}

# Factories rather than instances so callers can mutate what they receive.
FALLBACKS: Dict[TaskKind, Callable[[], StructuredRecord]] = {
    TaskKind.AMBIGUITY: lambda: AmbiguityReport(
        ambiguity_categories=["Vague terms", "Missing constraints"],
        analysis="The requirement contains vague terms and lacks specific constraints.",
        confidence_score=0.85,
        suggested_improvements="Add specific metrics and constraints to clarify the requirement.",
    ),
    TaskKind.SCOPE: lambda: ScopeEstimate(
        estimated_hours=24.0,
        complexity_level=ComplexityLevel.MEDIUM,
        confidence_level=0.75,
        justification=(
            "The requirement involves moderate complexity and requires integration "
            "with existing systems."
        ),
        risk_factors="Potential integration issues, unclear performance requirements.",
    ),
    TaskKind.PLAN: lambda: PlanDraft(
        summary="Implement a RESTful API with database integration",
        implementation_steps=[
            "Design database schema",
            "Create API endpoints",
            "Implement business logic",
            "Write unit tests",
            "Perform integration testing",
        ],
        technical_approach=(
            "Use a Python web framework for the backend, with a repository layer for data access"
        ),
        dependencies="FastAPI, pydantic, a document store",
    ),
    TaskKind.STORY_POINTS: lambda: StoryPointEstimate(
        story_points=5,
        complexity=ComplexityLevel.MEDIUM,
        confidence_level=0.8,
        justification=(
            "The requirement has moderate complexity and requires integration "
            "with existing systems."
        ),
        considerations=[
            "Technical complexity",
            "Integration requirements",
            "Testing effort",
            "UI/UX components",
        ],
    ),
    TaskKind.COMPLEXITY: lambda: ComplexityReport(
        complexity="Medium",
        story_points=5,
        affected_modules=["UserModule", "AuthService"],
        subtasks=["Update user schema", "Modify login flow"],
        refactors=["Refactor user service abstraction"],
        risks=["Potential auth timeout issues"],
    ),
    TaskKind.REPOSITORY: lambda: RepositoryAnalysis(
        complexity_score=0.65,
        code_quality_assessment="The code is moderately complex with some technical debt.",
        suggested_improvements=(
            "Increase test coverage, refactor complex methods, improve documentation."
        ),
        potential_issues=["Potential null pointer exceptions", "Inefficient database queries"],
    ),
}


def fallback_record(kind: TaskKind) -> StructuredRecord:
    """Return a fresh copy of the fixed fallback record for *kind*."""
    return FALLBACKS[kind]()


def parse_response(raw_text: Optional[str], kind: TaskKind) -> StructuredRecord:
    """Decode *raw_text* strictly as JSON into the record type for *kind*.

    Never raises: undecodable text, a non-object payload or a field that cannot
    be coerced to its type all yield :func:`fallback_record`.
    """
    try:
        data = json.loads(raw_text)  # type: ignore[arg-type]
    except (json.JSONDecodeError, TypeError) as exc:
        logger.warning("Failed to parse %s response as JSON: %s", kind.value, exc)
        return fallback_record(kind)
    if not isinstance(data, dict):
        logger.warning("Expected a JSON object for %s, got %s", kind.value, type(data).__name__)
        return fallback_record(kind)
    try:
        return RECORD_TYPES[kind].from_mapping(data)
    except (TypeError, ValueError, OverflowError) as exc:
        logger.warning("Unexpected field values in %s response: %s", kind.value, exc)
        return fallback_record(kind)
