"""Prompting, parsing and orchestration of the LLM analysis tasks."""

from .clarifier import MAX_ROUNDS, FeatureClarifier
from .complexity import ComplexityAnalyzer
from .parsing import (AmbiguityReport, ComplexityReport, PlanDraft,
                      RepositoryAnalysis, ScopeEstimate, StoryPointEstimate,
                      TaskKind, fallback_record, parse_response)
from .service import AnalysisService

__all__ = [
    "MAX_ROUNDS",
    "AmbiguityReport",
    "AnalysisService",
    "ComplexityAnalyzer",
    "ComplexityReport",
    "FeatureClarifier",
    "PlanDraft",
    "RepositoryAnalysis",
    "ScopeEstimate",
    "StoryPointEstimate",
    "TaskKind",
    "fallback_record",
    "parse_response",
]
