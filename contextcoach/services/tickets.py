"""Ticket creation against a mocked issue tracker."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from ..config import Settings
from ..errors import InvalidArgumentError, NotFoundError
from ..models import DeveloperProfile, JiraTicket, Requirement
from ..store import Store
from .requirements import RequirementService

logger = logging.getLogger(__name__)

# (upper bound on clarity score, story points), checked in order.
CLARITY_STORY_POINTS = ((0.3, 13), (0.5, 8), (0.7, 5), (0.9, 3))


def story_points_for_clarity(clarity_score: float) -> int:
    """Map a clarity score to story points: lower clarity means more work."""
    for upper_bound, points in CLARITY_STORY_POINTS:
        if clarity_score < upper_bound:
            return points
    return 1


def ticket_description(requirement: Requirement) -> str:
    description = f"*Requirement:*\n{requirement.content}\n\n"
    if requirement.clarity_score is not None:
        description += f"*Clarity Score:* {requirement.clarity_score}\n\n"
    return description


@dataclass
class TicketService:
    """Create and query tickets derived from requirements.

    Tickets are stored locally. When tracker credentials are configured the
    ticket also gets a mock external identifier; no remote call is made.
    """

    store: Store
    requirements: RequirementService
    settings: Settings

    def create_ticket(
        self,
        requirement_id: Optional[str],
        ticket_type: Optional[str],
        priority: Optional[str],
        assigned_developer_id: Optional[str] = None,
    ) -> JiraTicket:
        logger.info("Creating ticket for requirement ID: %s", requirement_id)
        if not requirement_id:
            raise InvalidArgumentError("Requirement ID cannot be null")
        if not ticket_type or not ticket_type.strip():
            raise InvalidArgumentError("Ticket type cannot be null or empty")
        if not priority or not priority.strip():
            raise InvalidArgumentError("Priority cannot be null or empty")

        requirement = self.requirements.get(requirement_id)
        developer: Optional[DeveloperProfile] = None
        if assigned_developer_id:
            developer = self.store.developers.get(assigned_developer_id)
            if developer is None:
                raise NotFoundError(f"Developer not found with ID: {assigned_developer_id}")

        ticket = JiraTicket(
            title=requirement.title,
            description=ticket_description(requirement),
            ticket_type=ticket_type,
            priority=priority,
            requirement_id=requirement_id,
            assigned_developer_id=developer.id if developer else None,
        )
        if requirement.clarity_score is not None:
            ticket.estimated_story_points = self._estimate(requirement, developer)
        if self.settings.jira_configured:
            ticket.external_ticket_id = self._create_external_ticket(ticket)

        saved = self.store.tickets.save(ticket)
        logger.info("Created ticket with ID: %s", saved.id)
        return saved

    def get(self, ticket_id: str) -> JiraTicket:
        ticket = self.store.tickets.get(ticket_id)
        if ticket is None:
            raise NotFoundError(f"Ticket not found with ID: {ticket_id}")
        return ticket

    def list(self) -> List[JiraTicket]:
        return self.store.tickets.list()

    def for_requirement(self, requirement_id: str) -> List[JiraTicket]:
        return self.store.tickets_for_requirement(requirement_id)

    def for_developer(self, developer_id: str) -> List[JiraTicket]:
        return self.store.tickets_for_developer(developer_id)

    def _estimate(self, requirement: Requirement, developer: Optional[DeveloperProfile]) -> int:
        if developer is None:
            return story_points_for_clarity(requirement.clarity_score)  # type: ignore[arg-type]
        estimate = self.requirements.calculate_story_points_with_developer(
            requirement.id, developer.id  # type: ignore[arg-type]
        )
        if estimate.story_points is None:
            return story_points_for_clarity(requirement.clarity_score)  # type: ignore[arg-type]
        return estimate.story_points

    def _create_external_ticket(self, ticket: JiraTicket) -> str:
        external_id = f"MOCK-{int(time.time() * 1000)}"
        logger.info(
            "Filed ticket '%s' in project %s as %s",
            ticket.title,
            self.settings.jira_project_key or "<unset>",
            external_id,
        )
        return external_id
