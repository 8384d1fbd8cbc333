"""Second CLI phase: estimate implementation effort for a clarified feature."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from ..llm import LLMClient
from ..search import ContextSearchClient
from .parsing import ComplexityReport, TaskKind, parse_response
from .prompts import complexity_prompt

logger = logging.getLogger(__name__)

CONTEXT_TOP_K = 5


@dataclass
class ComplexityAnalyzer:
    """Ask the LLM for complexity, story points, subtasks and risks."""

    search_client: ContextSearchClient
    llm: LLMClient

    def analyze(self, feature_description: str) -> ComplexityReport:
        logger.info("Starting feature complexity analysis")
        context = self.search_client.search(feature_description, CONTEXT_TOP_K)
        logger.debug("Retrieved %d code snippets for context", len(context))
        raw = self.llm.ask(complexity_prompt(feature_description, context))
        report = parse_response(raw, TaskKind.COMPLEXITY)
        logger.info("Complexity analysis completed")
        return report  # type: ignore[return-value]
