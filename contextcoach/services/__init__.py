"""Application services operating on the in-memory store."""

from .developers import DeveloperProfileService
from .requirements import RequirementService
from .tickets import TicketService, story_points_for_clarity

__all__ = [
    "DeveloperProfileService",
    "RequirementService",
    "TicketService",
    "story_points_for_clarity",
]
