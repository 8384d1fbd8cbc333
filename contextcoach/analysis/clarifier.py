"""Interactive clarification of a feature description."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from ..llm import LLMClient
from ..search import ContextSearchClient
from .prompts import ambiguity_question_prompt

logger = logging.getLogger(__name__)

MAX_ROUNDS = 5
CONTEXT_TOP_K = 5
CLARIFICATION_PREFIX = "\nClarification: "

AskHuman = Callable[[str], str]


@dataclass
class FeatureClarifier:
    """Refine a feature description by asking a human about ambiguities.

    Each round searches for context, asks the LLM for one clarifying question
    and appends the human's answer to the running description. The loop stops
    when the LLM has nothing to ask, the human gives no answer, or after
    ``max_rounds`` rounds.
    """

    search_client: ContextSearchClient
    llm: LLMClient
    max_rounds: int = MAX_ROUNDS

    def clarify(self, initial_text: str, ask_human: AskHuman) -> str:
        logger.info("Starting feature clarification")
        current = initial_text
        for round_number in range(1, self.max_rounds + 1):
            logger.debug("Clarification round %d", round_number)
            context = self.search_client.search(current, CONTEXT_TOP_K)
            question = self.llm.ask(ambiguity_question_prompt(current, context))
            # A question that merely mentions "none" also ends the loop.
            if question is None or not question.strip() or "none" in question.lower():
                logger.info("No ambiguities found, ending clarification")
                break
            answer = (ask_human(question) or "").strip()
            if not answer:
                logger.info("No clarification provided, ending clarification")
                break
            current += CLARIFICATION_PREFIX + answer
        logger.info("Feature clarification completed")
        return current
