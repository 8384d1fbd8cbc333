from __future__ import annotations

import json
from unittest import mock

import pytest
import requests
from tenacity import wait_none

from contextcoach.analysis.prompts import (ambiguity_question_prompt,
                                           complexity_prompt)
from contextcoach.config import Settings
from contextcoach.llm import (ChatCompletionsLLMClient, StubLLMClient,
                              get_default_client)


def _response(payload):
    response = mock.Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


def _client(session):
    return ChatCompletionsLLMClient(api_key="secret", session=session, wait=wait_none())


def test_stub_asks_until_text_is_clarified():
    stub = StubLLMClient()
    assert stub.ask(ambiguity_question_prompt("Add login", [])) == StubLLMClient.CLARIFYING_QUESTION
    clarified = "Add login\nClarification: Admins"
    assert stub.ask(ambiguity_question_prompt(clarified, [])) == "None"


def test_stub_returns_complexity_json():
    reply = StubLLMClient().ask(complexity_prompt("Add login", []))
    assert json.loads(reply)["affectedModules"] == ["UserModule", "AuthService"]


def test_stub_default_reply():
    assert StubLLMClient().ask("Hello there") == StubLLMClient.DEFAULT_REPLY


def test_chat_client_posts_payload_and_extracts_content():
    session = mock.Mock()
    session.post.return_value = _response({"choices": [{"message": {"content": "Hi"}}]})
    client = _client(session)

    assert client.ask("Say hi") == "Hi"

    args, kwargs = session.post.call_args
    assert kwargs["headers"] == {"Authorization": "Bearer secret"}
    assert kwargs["json"]["messages"] == [{"role": "user", "content": "Say hi"}]
    assert kwargs["json"]["model"] == "gpt-4o-mini"


def test_chat_client_retries_transient_failures():
    session = mock.Mock()
    session.post.side_effect = [
        requests.ConnectionError("refused"),
        _response({"choices": [{"message": {"content": "Recovered"}}]}),
    ]

    assert _client(session).ask("ping") == "Recovered"
    assert session.post.call_count == 2


def test_chat_client_returns_error_string_after_three_attempts():
    session = mock.Mock()
    session.post.side_effect = requests.ConnectionError("refused")

    reply = _client(session).ask("ping")

    assert reply.startswith("Error: ")
    assert "refused" in reply
    assert session.post.call_count == 3


def test_chat_client_reports_missing_content():
    session = mock.Mock()
    session.post.return_value = _response({"choices": []})

    assert _client(session).ask("ping") == "Error: Unable to extract content from API response"


def test_chat_client_requires_key():
    with pytest.raises(ValueError):
        ChatCompletionsLLMClient(api_key="")


def test_default_client_selection():
    assert isinstance(get_default_client(Settings()), StubLLMClient)
    assert isinstance(get_default_client(Settings(llm_api_key="k")), ChatCompletionsLLMClient)
