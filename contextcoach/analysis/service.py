"""Requirement analysis tasks backed by the LLM client."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import InvalidArgumentError
from ..llm import LLMClient
from ..models import DeveloperProfile
from . import prompts
from .parsing import (AmbiguityReport, PlanDraft, RepositoryAnalysis,
                      ScopeEstimate, StoryPointEstimate, TaskKind,
                      parse_response)

logger = logging.getLogger(__name__)


def _require_text(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise InvalidArgumentError(f"{label} cannot be null or empty")
    return value


@dataclass
class AnalysisService:
    """Build a task prompt, ask the LLM and parse the reply.

    Every task returns a typed record. Replies that do not parse are replaced
    by the task's fallback record, so these methods only fail on bad input.
    """

    llm: LLMClient

    def detect_ambiguities(self, text: Optional[str]) -> AmbiguityReport:
        text = _require_text(text, "Requirement text")
        logger.info("Detecting ambiguities in requirement text")
        raw = self.llm.ask(prompts.ambiguity_detection_prompt(text))
        return parse_response(raw, TaskKind.AMBIGUITY)  # type: ignore[return-value]

    def estimate_scope(self, text: Optional[str]) -> ScopeEstimate:
        text = _require_text(text, "Requirement text")
        logger.info("Estimating scope for requirement text")
        raw = self.llm.ask(prompts.scope_estimation_prompt(text))
        return parse_response(raw, TaskKind.SCOPE)  # type: ignore[return-value]

    def generate_implementation_plan(self, text: Optional[str]) -> PlanDraft:
        text = _require_text(text, "Requirement text")
        logger.info("Generating implementation plan for requirement text")
        raw = self.llm.ask(prompts.implementation_plan_prompt(text))
        return parse_response(raw, TaskKind.PLAN)  # type: ignore[return-value]

    def calculate_story_points(
        self,
        text: Optional[str],
        repository_complexity: Optional[float] = None,
        developer: Optional[DeveloperProfile] = None,
    ) -> StoryPointEstimate:
        text = _require_text(text, "Requirement text")
        logger.info(
            "Calculating story points (repository complexity=%s, developer=%s)",
            repository_complexity,
            developer.name if developer else None,
        )
        raw = self.llm.ask(prompts.story_points_prompt(text, repository_complexity, developer))
        return parse_response(raw, TaskKind.STORY_POINTS)  # type: ignore[return-value]

    def analyze_repository(self, content: Optional[str]) -> RepositoryAnalysis:
        content = _require_text(content, "Repository content")
        logger.info("Analyzing repository content for complexity")
        raw = self.llm.ask(prompts.repository_analysis_prompt(content))
        return parse_response(raw, TaskKind.REPOSITORY)  # type: ignore[return-value]
