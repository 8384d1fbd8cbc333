from __future__ import annotations

import json

import pytest

from contextcoach.analysis import (AmbiguityReport, ComplexityReport, PlanDraft,
                                   RepositoryAnalysis, ScopeEstimate,
                                   StoryPointEstimate, TaskKind,
                                   fallback_record, parse_response)
from contextcoach.models import ComplexityLevel


@pytest.mark.parametrize("kind", list(TaskKind))
@pytest.mark.parametrize("raw", ["", "not json", "```json\n{}\n```", "[1, 2]", "42", None])
def test_undecodable_or_non_object_yields_fallback(kind, raw):
    assert parse_response(raw, kind) == EXPECTED_FALLBACKS[kind]


def test_fallback_records_are_fresh_copies():
    first = fallback_record(TaskKind.PLAN)
    first.implementation_steps.append("Deploy")
    assert "Deploy" not in fallback_record(TaskKind.PLAN).implementation_steps


EXPECTED_FALLBACKS = {
    TaskKind.AMBIGUITY: AmbiguityReport(
        ambiguity_categories=["Vague terms", "Missing constraints"],
        analysis="The requirement contains vague terms and lacks specific constraints.",
        confidence_score=0.85,
        suggested_improvements="Add specific metrics and constraints to clarify the requirement.",
    ),
    TaskKind.SCOPE: ScopeEstimate(
        estimated_hours=24.0,
        complexity_level=ComplexityLevel.MEDIUM,
        confidence_level=0.75,
        justification=(
            "The requirement involves moderate complexity and requires integration "
            "with existing systems."
        ),
        risk_factors="Potential integration issues, unclear performance requirements.",
    ),
    TaskKind.PLAN: PlanDraft(
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
    TaskKind.STORY_POINTS: StoryPointEstimate(
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
        developer_factors=None,
    ),
    TaskKind.COMPLEXITY: ComplexityReport(
        complexity="Medium",
        story_points=5,
        affected_modules=["UserModule", "AuthService"],
        subtasks=["Update user schema", "Modify login flow"],
        refactors=["Refactor user service abstraction"],
        risks=["Potential auth timeout issues"],
    ),
    TaskKind.REPOSITORY: RepositoryAnalysis(
        complexity_score=0.65,
        code_quality_assessment="The code is moderately complex with some technical debt.",
        suggested_improvements=(
            "Increase test coverage, refactor complex methods, improve documentation."
        ),
        potential_issues=["Potential null pointer exceptions", "Inefficient database queries"],
    ),
}


@pytest.mark.parametrize("kind", list(TaskKind))
def test_malformed_reply_yields_exact_fixed_record(kind):
    assert parse_response("The model rambled instead of answering.", kind) == EXPECTED_FALLBACKS[kind]



def test_valid_ambiguity_reply():
    raw = json.dumps(
        {
            "ambiguityCategories": ["Scope"],
            "analysis": "Unclear users",
            "confidenceScore": 0.4,
            "suggestedImprovements": "Name the roles",
        }
    )
    assert parse_response(raw, TaskKind.AMBIGUITY) == AmbiguityReport(
        ambiguity_categories=["Scope"],
        analysis="Unclear users",
        confidence_score=0.4,
        suggested_improvements="Name the roles",
    )


def test_missing_keys_become_none_or_empty():
    assert parse_response("{}", TaskKind.SCOPE) == ScopeEstimate()
    assert parse_response("{}", TaskKind.PLAN) == PlanDraft()
    assert parse_response("{}", TaskKind.REPOSITORY) == RepositoryAnalysis()


def test_scalar_list_fields_become_single_item_lists():
    plan = parse_response('{"implementationSteps": "Do it"}', TaskKind.PLAN)
    assert plan.implementation_steps == ["Do it"]

    points = parse_response('{"storyPoints": 3, "considerations": "Testing"}', TaskKind.STORY_POINTS)
    assert points.considerations == ["Testing"]
    assert points.story_points == 3

    repo = parse_response('{"potentialIssues": "Leaks"}', TaskKind.REPOSITORY)
    assert repo.potential_issues == ["Leaks"]

    report = parse_response('{"risks": "Timeouts", "subtasks": ["A", "B"]}', TaskKind.COMPLEXITY)
    assert report.risks == ["Timeouts"]
    assert report.subtasks == ["A", "B"]


def test_complexity_level_is_case_insensitive():
    estimate = parse_response('{"complexityLevel": "high"}', TaskKind.SCOPE)
    assert estimate.complexity_level is ComplexityLevel.HIGH


@pytest.mark.parametrize(
    "raw, kind",
    [
        ('{"complexityLevel": "Enormous"}', TaskKind.SCOPE),
        ('{"estimatedHours": "lots"}', TaskKind.SCOPE),
        ('{"storyPoints": true}', TaskKind.STORY_POINTS),
        ('{"confidenceScore": {"value": 1}}', TaskKind.AMBIGUITY),
    ],
)
def test_uncoercible_field_yields_fallback(raw, kind):
    assert parse_response(raw, kind) == EXPECTED_FALLBACKS[kind]


def test_story_points_developer_factors_only_serialised_when_present():
    plain = StoryPointEstimate(story_points=3, complexity=ComplexityLevel.LOW)
    assert "developerFactors" not in plain.as_dict()
    assert plain.as_dict()["complexity"] == "Low"

    tailored = StoryPointEstimate(story_points=3, developer_factors="Senior")
    assert tailored.as_dict()["developerFactors"] == "Senior"


def test_complexity_report_as_dict_uses_wire_keys():
    report = ComplexityReport(complexity="Low", story_points=2, affected_modules=["Auth"])
    assert report.as_dict() == {
        "complexity": "Low",
        "storyPoints": 2,
        "affectedModules": ["Auth"],
        "subtasks": [],
        "refactors": [],
        "risks": [],
    }
