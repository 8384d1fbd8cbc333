from __future__ import annotations

import json

import pytest
from conftest import ScriptedLLM, build_requirement_service

from contextcoach.analysis import AnalysisService, TaskKind, fallback_record
from contextcoach.config import Settings
from contextcoach.errors import InvalidArgumentError, NotFoundError
from contextcoach.llm import StubLLMClient
from contextcoach.models import ComplexityLevel, SourceType
from contextcoach.services import story_points_for_clarity


def _developer(service, **overrides):
    values = dict(
        name="Ada",
        experience_level="Senior",
        productivity_factor=1.2,
        skills=["python", "fastapi"],
        preferred_work_hours_per_day=6,
    )
    values.update(overrides)
    return service.create(**values)


def test_create_requirement_from_text(store):
    service = build_requirement_service(store, StubLLMClient())
    requirement = service.create_from_text("Login", "Users sign in", 0.6)

    assert requirement.id
    assert requirement.source_type is SourceType.TEXT
    assert requirement.created_at is not None
    assert service.get(requirement.id) is requirement
    assert service.list() == [requirement]


@pytest.mark.parametrize(
    "title, content, clarity",
    [("", "x", None), ("t", "  ", None), (None, "x", None), ("t", "x", 1.5)],
)
def test_create_requirement_rejects_bad_input(store, title, content, clarity):
    service = build_requirement_service(store, StubLLMClient())
    with pytest.raises(InvalidArgumentError):
        service.create_from_text(title, content, clarity)
    assert len(store.requirements.list()) == 0


def test_create_requirement_from_file(store):
    service = build_requirement_service(store, StubLLMClient())
    requirement = service.create_from_file(
        filename="req.json",
        content_type="application/json",
        data=b'{"description": "Export reports"}',
        title="Reports",
    )
    assert requirement.content == "Export reports"
    assert requirement.source_type is SourceType.JSON
    assert requirement.file_name == "req.json"


def test_unknown_requirement_raises_not_found(store):
    service = build_requirement_service(store, StubLLMClient())
    with pytest.raises(NotFoundError):
        service.get("missing")
    with pytest.raises(NotFoundError):
        service.analyze("missing")
    with pytest.raises(NotFoundError):
        service.plans("missing")


def test_analysis_tasks_fall_back_and_persist(store):
    service = build_requirement_service(store, StubLLMClient())
    requirement = service.create_from_text("Login", "Users sign in")

    ambiguity = service.analyze(requirement.id)
    scope = service.estimate_scope(requirement.id)
    plan = service.generate_plan(requirement.id)

    expected = fallback_record(TaskKind.AMBIGUITY)
    assert ambiguity.ambiguity_categories == expected.ambiguity_categories
    assert scope.complexity_level is ComplexityLevel.MEDIUM
    assert plan.implementation_steps == fallback_record(TaskKind.PLAN).implementation_steps
    assert service.ambiguity_results(requirement.id) == [ambiguity]
    assert service.scope_results(requirement.id) == [scope]
    assert service.plans(requirement.id) == [plan]


def test_story_points_with_developer_uses_profile_in_prompt(store, developer_service):
    reply = json.dumps({"storyPoints": 3, "complexity": "Low", "developerFactors": "Senior dev"})
    llm = ScriptedLLM([reply])
    service = build_requirement_service(store, llm)
    requirement = service.create_from_text("Login", "Users sign in")
    developer = _developer(developer_service)

    estimate = service.calculate_story_points_with_developer(requirement.id, developer.id, 0.4)

    assert estimate.story_points == 3
    assert estimate.developer_factors == "Senior dev"
    assert "Experience Level: Senior" in llm.prompts[0]
    assert "Skills: python, fastapi" in llm.prompts[0]
    assert "Repository complexity score: 0.4" in llm.prompts[0]

    with pytest.raises(NotFoundError):
        service.calculate_story_points_with_developer(requirement.id, "missing")


def test_analysis_service_rejects_blank_text():
    with pytest.raises(InvalidArgumentError):
        AnalysisService(llm=StubLLMClient()).analyze_repository("  ")


def test_developer_with_zero_productivity_is_rejected_before_save(store, developer_service):
    with pytest.raises(InvalidArgumentError):
        _developer(developer_service, productivity_factor=0)
    assert len(store.developers.list()) == 0


def test_developer_update_validates_before_lookup(developer_service):
    with pytest.raises(InvalidArgumentError):
        developer_service.update("missing", "Ada", "Senior", 1.0, [], 0)
    with pytest.raises(NotFoundError):
        developer_service.update("missing", "Ada", "Senior", 1.0, [], 8)


def test_developer_searches(developer_service):
    ada = _developer(developer_service)
    bob = _developer(developer_service, name="Bob", experience_level="Junior", skills=["java"])

    assert developer_service.search_by_name("ad") == [ada]
    assert developer_service.search_by_experience("Junior") == [bob]
    assert developer_service.search_by_skill("java") == [bob]
    with pytest.raises(InvalidArgumentError):
        developer_service.search_by_skill(" ")


def test_developer_delete(developer_service):
    ada = _developer(developer_service)
    developer_service.delete(ada.id)
    with pytest.raises(NotFoundError):
        developer_service.get(ada.id)
    with pytest.raises(NotFoundError):
        developer_service.delete(ada.id)


@pytest.mark.parametrize(
    "score, points",
    [(0.0, 13), (0.29, 13), (0.3, 8), (0.49, 8), (0.5, 5), (0.7, 3), (0.89, 3), (0.9, 1), (1.0, 1)],
)
def test_story_points_for_clarity(score, points):
    assert story_points_for_clarity(score) == points


def test_ticket_uses_clarity_threshold_without_developer(store, ticket_factory):
    tickets = ticket_factory(StubLLMClient())
    requirement = tickets.requirements.create_from_text("Login", "Users sign in", 0.4)

    ticket = tickets.create_ticket(requirement.id, "Story", "High")

    assert ticket.title == "Login"
    assert ticket.description == "*Requirement:*\nUsers sign in\n\n*Clarity Score:* 0.4\n\n"
    assert ticket.estimated_story_points == 8
    assert ticket.external_ticket_id is None
    assert tickets.for_requirement(requirement.id) == [ticket]


def test_ticket_without_clarity_has_no_estimate(ticket_factory):
    tickets = ticket_factory(StubLLMClient())
    requirement = tickets.requirements.create_from_text("Login", "Users sign in")

    ticket = tickets.create_ticket(requirement.id, "Task", "Low")

    assert ticket.estimated_story_points is None
    assert ticket.description == "*Requirement:*\nUsers sign in\n\n"


def test_ticket_with_developer_uses_llm_estimate(ticket_factory, developer_service):
    tickets = ticket_factory(ScriptedLLM([json.dumps({"storyPoints": 2})]))
    requirement = tickets.requirements.create_from_text("Login", "Users sign in", 0.1)
    developer = _developer(developer_service)

    ticket = tickets.create_ticket(requirement.id, "Story", "High", developer.id)

    assert ticket.estimated_story_points == 2
    assert ticket.assigned_developer_id == developer.id
    assert tickets.for_developer(developer.id) == [ticket]


def test_ticket_gets_mock_external_id_when_tracker_configured(ticket_factory):
    configured = Settings(jira_api_url="https://jira", jira_username="u", jira_api_token="t")
    tickets = ticket_factory(StubLLMClient(), configured)
    requirement = tickets.requirements.create_from_text("Login", "Users sign in")

    ticket = tickets.create_ticket(requirement.id, "Story", "High")

    assert ticket.external_ticket_id.startswith("MOCK-")
    assert ticket.external_ticket_id[len("MOCK-"):].isdigit()


def test_ticket_validation(ticket_factory):
    tickets = ticket_factory(StubLLMClient())
    requirement = tickets.requirements.create_from_text("Login", "Users sign in")

    with pytest.raises(InvalidArgumentError):
        tickets.create_ticket(requirement.id, " ", "High")
    with pytest.raises(InvalidArgumentError):
        tickets.create_ticket(requirement.id, "Story", "")
    with pytest.raises(NotFoundError):
        tickets.create_ticket("missing", "Story", "High")
    with pytest.raises(NotFoundError):
        tickets.create_ticket(requirement.id, "Story", "High", "missing")
    with pytest.raises(NotFoundError):
        tickets.get("missing")


@pytest.mark.parametrize("field", ["productivity_factor", "preferred_work_hours_per_day"])
@pytest.mark.parametrize("value", [float("nan"), float("inf"), -1.0, None])
def test_developer_rejects_non_positive_or_non_finite_numbers(store, developer_service, field, value):
    with pytest.raises(InvalidArgumentError):
        _developer(developer_service, **{field: value})
    assert store.developers.list() == []


def test_developer_update_rejects_nan(developer_service):
    ada = _developer(developer_service)
    with pytest.raises(InvalidArgumentError):
        developer_service.update(ada.id, "Ada", "Senior", float("nan"), [], 8)
    assert developer_service.get(ada.id).productivity_factor == 1.2


def test_result_listing_for_unknown_requirement_raises(store):
    service = build_requirement_service(store, StubLLMClient())
    with pytest.raises(NotFoundError):
        service.ambiguity_results("missing")
    with pytest.raises(NotFoundError):
        service.scope_results("missing")


def test_external_ticket_logged_under_project_key(ticket_factory, caplog):
    configured = Settings(
        jira_api_url="https://jira",
        jira_username="u",
        jira_api_token="t",
        jira_project_key="CC",
    )
    tickets = ticket_factory(StubLLMClient(), configured)
    requirement = tickets.requirements.create_from_text("Login", "Users sign in")

    with caplog.at_level("INFO", logger="contextcoach.services.tickets"):
        ticket = tickets.create_ticket(requirement.id, "Story", "High")

    assert f"in project CC as {ticket.external_ticket_id}" in caplog.text
