"""In-memory persistence for ContextCoach records."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..models import (AmbiguityDetectionResult, DeveloperProfile,
                      ImplementationPlan, JiraTicket, Requirement,
                      ScopeEstimationResult)
from .repository import InMemoryRepository

__all__ = ["InMemoryRepository", "Store"]


@dataclass
class Store:
    """One repository per record type, shared by the services."""

    requirements: InMemoryRepository[Requirement] = field(default_factory=InMemoryRepository)
    ambiguity_results: InMemoryRepository[AmbiguityDetectionResult] = field(
        default_factory=InMemoryRepository
    )
    scope_results: InMemoryRepository[ScopeEstimationResult] = field(
        default_factory=InMemoryRepository
    )
    plans: InMemoryRepository[ImplementationPlan] = field(default_factory=InMemoryRepository)
    developers: InMemoryRepository[DeveloperProfile] = field(default_factory=InMemoryRepository)
    tickets: InMemoryRepository[JiraTicket] = field(default_factory=InMemoryRepository)

    def developers_by_name(self, name: str) -> List[DeveloperProfile]:
        needle = name.lower()
        return self.developers.find(lambda dev: needle in dev.name.lower())

    def developers_by_experience(self, experience_level: str) -> List[DeveloperProfile]:
        return self.developers.find(lambda dev: dev.experience_level == experience_level)

    def developers_by_skill(self, skill: str) -> List[DeveloperProfile]:
        return self.developers.find(lambda dev: skill in dev.skills)

    def tickets_for_requirement(self, requirement_id: str) -> List[JiraTicket]:
        return self.tickets.find(lambda ticket: ticket.requirement_id == requirement_id)

    def tickets_for_developer(self, developer_id: str) -> List[JiraTicket]:
        return self.tickets.find(lambda ticket: ticket.assigned_developer_id == developer_id)

    def ambiguity_results_for(self, requirement_id: str) -> List[AmbiguityDetectionResult]:
        return self.ambiguity_results.find(lambda item: item.requirement_id == requirement_id)

    def scope_results_for(self, requirement_id: str) -> List[ScopeEstimationResult]:
        return self.scope_results.find(lambda item: item.requirement_id == requirement_id)

    def plans_for(self, requirement_id: str) -> List[ImplementationPlan]:
        return self.plans.find(lambda item: item.requirement_id == requirement_id)
