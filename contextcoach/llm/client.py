"""LLM client abstraction with an OpenAI-compatible chat completions backend."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

import requests
from tenacity import (Retrying, retry_if_exception_type, stop_after_attempt,
                      wait_exponential)
from tenacity.wait import wait_base

from ..config import DEFAULT_LLM_API_URL, DEFAULT_LLM_MODEL, Settings

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
REQUEST_TIMEOUT = 120


@dataclass
class LLMPrompt:
    """Container for a prompt block sent to the LLM."""

    role: str
    content: str


class LLMClient:
    """Abstract base class for LLM providers."""

    def generate(
        self,
        messages: Iterable[LLMPrompt],
        *,
        temperature: float = 0.2,
        max_tokens: int = 800,
        extra: Optional[Mapping[str, object]] = None,
    ) -> str:
        raise NotImplementedError

    def ask(self, prompt: str) -> str:
        """Send a single user prompt and return the text reply."""
        return self.generate([LLMPrompt(role="user", content=prompt)])


class StubLLMClient(LLMClient):
    """Offline client that simulates the replies of a real model.

    Ambiguity prompts get one clarifying question until the text already
    carries a clarification, complexity prompts get a fixed JSON report.
    """

    CLARIFYING_QUESTION = "Which user role is this feature for?"
    COMPLEXITY_REPORT = (
        "{\n"
        '  "complexity": "Medium",\n'
        '  "storyPoints": 5,\n'
        '  "affectedModules": ["UserModule", "AuthService"],\n'
        '  "subtasks": ["Update user schema", "Modify login flow"],\n'
        '  "refactors": ["Refactor user service abstraction"],\n'
        '  "risks": ["Potential auth timeout issues"]\n'
        "}"
    )
    DEFAULT_REPLY = "I don't have a specific response for this prompt."

    def generate(
        self,
        messages: Iterable[LLMPrompt],
        *,
        temperature: float = 0.2,
        max_tokens: int = 800,
        extra: Optional[Mapping[str, object]] = None,
    ) -> str:
        last = ""
        for message in messages:
            if message.role == "user":
                last = message.content
        lowered = last.lower()
        if "identify ambiguities" in lowered:
            if "clarification:" in lowered:
                return "None"
            return self.CLARIFYING_QUESTION
        if "analyze the following feature request" in lowered:
            return self.COMPLEXITY_REPORT
        return self.DEFAULT_REPLY


class ChatCompletionsLLMClient(LLMClient):
    """Client for an OpenAI-compatible ``/chat/completions`` endpoint.

    Transport failures are retried with exponential backoff. Once the attempts
    are exhausted the failure is reported as an ``"Error: ..."`` string so
    callers can fall back to default content instead of failing.
    """

    def __init__(
        self,
        *,
        api_key: str,
        api_url: str | None = None,
        model: str | None = None,
        session: requests.Session | None = None,
        wait: wait_base | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("An API key is required for the chat completions client")
        self.api_key = api_key
        self.api_url = api_url or DEFAULT_LLM_API_URL
        self.model = model or DEFAULT_LLM_MODEL
        self.session = session or requests.Session()
        self._retrying = Retrying(
            stop=stop_after_attempt(MAX_ATTEMPTS),
            wait=wait or wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(requests.RequestException),
            reraise=True,
        )
        logger.info("Chat completions client initialised with model %s", self.model)

    def generate(
        self,
        messages: Iterable[LLMPrompt],
        *,
        temperature: float = 0.2,
        max_tokens: int = 800,
        extra: Optional[Mapping[str, object]] = None,
    ) -> str:
        payload_messages: List[dict] = [
            {"role": prompt.role, "content": prompt.content} for prompt in messages
        ]
        payload = {
            "model": self.model,
            "messages": payload_messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if extra:
            payload.update(extra)
        try:
            data = self._retrying(self._post, payload)
        except (requests.RequestException, ValueError) as exc:
            logger.error("LLM request failed after %d attempts: %s", MAX_ATTEMPTS, exc)
            return f"Error: {exc}"
        content = _extract_content(data)
        if content is None:
            logger.error("Unable to extract content from LLM response: %s", data)
            return "Error: Unable to extract content from API response"
        return content

    def _post(self, payload: dict) -> dict:
        logger.debug("Calling %s with model %s", self.api_url, self.model)
        response = self.session.post(
            self.api_url,
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        return response.json()


def _extract_content(data: object) -> Optional[str]:
    if not isinstance(data, Mapping):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    message = choices[0].get("message") if isinstance(choices[0], Mapping) else None
    if not isinstance(message, Mapping):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


def get_default_client(settings: Settings | None = None) -> LLMClient:
    """Return the configured LLM client, falling back to the stub client."""
    settings = settings or Settings.from_env()
    if not settings.llm_api_key:
        logger.info("No LLM API key configured; using the stub LLM client")
        return StubLLMClient()
    try:
        return ChatCompletionsLLMClient(
            api_key=settings.llm_api_key,
            api_url=settings.llm_api_url,
            model=settings.llm_model,
        )
    except Exception as exc:
        logger.warning("Falling back to the stub LLM client: %s", exc)
        return StubLLMClient()
