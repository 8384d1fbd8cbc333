from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

import pytest

from contextcoach.analysis import AnalysisService
from contextcoach.config import Settings
from contextcoach.llm import LLMClient, LLMPrompt
from contextcoach.services import (DeveloperProfileService, RequirementService,
                                   TicketService)
from contextcoach.store import Store


class ScriptedLLM(LLMClient):
    """Replies with queued responses, repeating the last one once exhausted."""

    def __init__(self, replies: Sequence[Optional[str]]) -> None:
        self.replies = list(replies)
        self.prompts: List[str] = []

    def generate(self, messages: Iterable[LLMPrompt], **kwargs) -> str:
        prompt = [message.content for message in messages][-1]
        self.prompts.append(prompt)
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0]


class RecordingSearch:
    name = "recording"
    description = "Records queries and returns one fixed snippet."

    def __init__(self, snippets: Sequence[str] = ("snippet",)) -> None:
        self.snippets = list(snippets)
        self.calls: List[tuple] = []

    def search(self, query: str, top_k: int = 5) -> List[str]:
        self.calls.append((query, top_k))
        return self.snippets[:top_k]


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def settings() -> Settings:
    return Settings()


def build_requirement_service(store: Store, llm: LLMClient) -> RequirementService:
    return RequirementService(store=store, analysis=AnalysisService(llm=llm))


@pytest.fixture
def developer_service(store: Store) -> DeveloperProfileService:
    return DeveloperProfileService(store=store)


@pytest.fixture
def ticket_factory(store: Store, settings: Settings):
    def make(llm: LLMClient, ticket_settings: Settings | None = None) -> TicketService:
        return TicketService(
            store=store,
            requirements=build_requirement_service(store, llm),
            settings=ticket_settings or settings,
        )

    return make
