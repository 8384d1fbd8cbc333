"""Requirement intake and the per-requirement analysis tasks."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..analysis import AnalysisService, StoryPointEstimate
from ..errors import InvalidArgumentError, NotFoundError
from ..ingest import determine_source_type, extract_requirement_text
from ..models import (AmbiguityDetectionResult, DeveloperProfile,
                      ImplementationPlan, Requirement, ScopeEstimationResult,
                      SourceType)
from ..store import Store

logger = logging.getLogger(__name__)


@dataclass
class RequirementService:
    """Create requirements and run the LLM tasks against them.

    Each task fetches the requirement, asks the analysis service for a record,
    persists it where the record type is stored, and returns it.
    """

    store: Store
    analysis: AnalysisService

    def create_from_text(
        self,
        title: Optional[str],
        content: Optional[str],
        clarity_score: Optional[float] = None,
    ) -> Requirement:
        if not title or not title.strip():
            raise InvalidArgumentError("Requirement title cannot be null or empty")
        if not content or not content.strip():
            raise InvalidArgumentError("Requirement content cannot be null or empty")
        if clarity_score is not None and not 0.0 <= clarity_score <= 1.0:
            raise InvalidArgumentError("Clarity score must be between 0 and 1")
        logger.info("Creating requirement from text with title: %s", title)
        requirement = Requirement(
            title=title,
            content=content,
            source_type=SourceType.TEXT,
            clarity_score=clarity_score,
        )
        saved = self.store.requirements.save(requirement)
        logger.info("Created requirement with ID: %s", saved.id)
        return saved

    def create_from_file(
        self,
        *,
        filename: Optional[str],
        content_type: Optional[str],
        data: bytes,
        title: Optional[str],
    ) -> Requirement:
        if not title or not title.strip():
            raise InvalidArgumentError("Requirement title cannot be null or empty")
        logger.info("Creating requirement from file: %s", filename)
        content = extract_requirement_text(filename, content_type, data)
        requirement = Requirement(
            title=title,
            content=content,
            file_name=filename,
            file_type=content_type,
            source_type=determine_source_type(filename, content_type),
        )
        saved = self.store.requirements.save(requirement)
        logger.info("Created requirement with ID: %s", saved.id)
        return saved

    def get(self, requirement_id: str) -> Requirement:
        requirement = self.store.requirements.get(requirement_id)
        if requirement is None:
            logger.error("Requirement not found with ID: %s", requirement_id)
            raise NotFoundError(f"Requirement not found with ID: {requirement_id}")
        return requirement

    def list(self) -> List[Requirement]:
        return self.store.requirements.list()

    def analyze(self, requirement_id: str) -> AmbiguityDetectionResult:
        requirement = self.get(requirement_id)
        logger.info("Analyzing requirement with ID: %s", requirement_id)
        report = self.analysis.detect_ambiguities(requirement.content)
        result = AmbiguityDetectionResult(
            requirement_id=requirement_id,
            ambiguity_categories=list(report.ambiguity_categories),
            analysis=report.analysis,
            confidence_score=report.confidence_score,
            suggested_improvements=report.suggested_improvements,
        )
        return self.store.ambiguity_results.save(result)

    def estimate_scope(self, requirement_id: str) -> ScopeEstimationResult:
        requirement = self.get(requirement_id)
        logger.info("Estimating scope for requirement with ID: %s", requirement_id)
        estimate = self.analysis.estimate_scope(requirement.content)
        result = ScopeEstimationResult(
            requirement_id=requirement_id,
            estimated_hours=estimate.estimated_hours,
            complexity_level=estimate.complexity_level,
            confidence_level=estimate.confidence_level,
            justification=estimate.justification,
            risk_factors=estimate.risk_factors,
        )
        return self.store.scope_results.save(result)

    def generate_plan(self, requirement_id: str) -> ImplementationPlan:
        requirement = self.get(requirement_id)
        logger.info("Generating implementation plan for requirement with ID: %s", requirement_id)
        draft = self.analysis.generate_implementation_plan(requirement.content)
        plan = ImplementationPlan(
            requirement_id=requirement_id,
            summary=draft.summary,
            implementation_steps=list(draft.implementation_steps),
            technical_approach=draft.technical_approach,
            dependencies=draft.dependencies,
        )
        return self.store.plans.save(plan)

    def calculate_story_points(
        self,
        requirement_id: str,
        repository_complexity: Optional[float] = None,
    ) -> StoryPointEstimate:
        requirement = self.get(requirement_id)
        logger.info("Calculating story points for requirement with ID: %s", requirement_id)
        return self.analysis.calculate_story_points(requirement.content, repository_complexity)

    def calculate_story_points_with_developer(
        self,
        requirement_id: str,
        developer_id: str,
        repository_complexity: Optional[float] = None,
    ) -> StoryPointEstimate:
        requirement = self.get(requirement_id)
        developer = self._developer(developer_id)
        logger.info(
            "Calculating story points for requirement %s and developer %s",
            requirement_id,
            developer_id,
        )
        return self.analysis.calculate_story_points(
            requirement.content, repository_complexity, developer
        )

    def ambiguity_results(self, requirement_id: str) -> List[AmbiguityDetectionResult]:
        self._require_requirement(requirement_id)
        return self.store.ambiguity_results_for(requirement_id)

    def scope_results(self, requirement_id: str) -> List[ScopeEstimationResult]:
        self._require_requirement(requirement_id)
        return self.store.scope_results_for(requirement_id)

    def plans(self, requirement_id: str) -> List[ImplementationPlan]:
        self._require_requirement(requirement_id)
        return self.store.plans_for(requirement_id)

    def _require_requirement(self, requirement_id: str) -> None:
        if not self.store.requirements.exists(requirement_id):
            raise NotFoundError(f"Requirement not found with ID: {requirement_id}")

    def _developer(self, developer_id: str) -> DeveloperProfile:
        developer = self.store.developers.get(developer_id)
        if developer is None:
            logger.error("Developer profile not found with ID: %s", developer_id)
            raise NotFoundError(f"Developer profile not found with ID: {developer_id}")
        return developer
