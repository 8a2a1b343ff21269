"""Tests for the chat provider layer, with the OpenAI SDK client mocked."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import openai
import pytest

from storyflow.chat.llm_providers import (
    ChatResponse,
    ChatResponseItem,
    JsonSchema,
    OpenAIChatClient,
    OpenAIChatManager,
    SystemMessage,
    UserMessage,
    resolve_model_name,
)
from storyflow.errors import ConfigurationError, ProviderError


def _completion(*contents, refusal=None):
    choices = [SimpleNamespace(message=SimpleNamespace(content=c, refusal=None)) for c in contents]
    if refusal is not None:
        choices.append(SimpleNamespace(message=SimpleNamespace(content=None, refusal=refusal)))
    return SimpleNamespace(choices=choices)


def _sdk_client(completion=None, error=None) -> MagicMock:
    sdk = MagicMock()
    sdk.chat.completions.create = AsyncMock(return_value=completion, side_effect=error)
    return sdk


SCHEMA = JsonSchema({"type": "object", "additionalProperties": False}, "story_score", True)
MESSAGES = [SystemMessage("be fair"), UserMessage("score this")]


def test_messages_serialize_with_roles() -> None:
    assert [m.to_dict() for m in MESSAGES] == [
        {"role": "system", "content": "be fair"},
        {"role": "user", "content": "score this"},
    ]


def test_missing_api_key_raises_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    manager = OpenAIChatManager()
    with pytest.raises(ConfigurationError):
        manager.get_client("gpt-4o")


def test_blank_api_key_raises_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        OpenAIChatManager(api_key="   ").get_client("gpt-4o")


def test_blank_model_name_rejected() -> None:
    with pytest.raises(ConfigurationError):
        OpenAIChatManager(api_key="sk-test").get_client(" ")


def test_get_client_shares_sdk_client(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    manager = OpenAIChatManager()
    first = manager.get_client("gpt-4o")
    second = manager.get_client("gpt-4o-mini")
    assert isinstance(first, OpenAIChatClient)
    assert first.client is second.client
    assert second.model_name == "gpt-4o-mini"


def test_resolve_model_name(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_model_name() == "gpt-4o"
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")
    assert resolve_model_name() == "gpt-4o-mini"
    assert resolve_model_name("o1") == "o1"


async def test_structured_request_carries_schema_and_messages() -> None:
    sdk = _sdk_client(_completion('{"a": 1}'))
    client = OpenAIChatManager(client=sdk).get_client("gpt-4o")

    response = await client.get_structured_response(MESSAGES, SCHEMA)

    assert response == ChatResponse([ChatResponseItem('{"a": 1}')])
    kwargs = sdk.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["messages"][0]["role"] == "system"
    assert kwargs["messages"][1] == {"role": "user", "content": "score this"}
    assert kwargs["response_format"] == {
        "type": "json_schema",
        "json_schema": {
            "name": "story_score",
            "schema": {"type": "object", "additionalProperties": False},
            "strict": True,
        },
    }


async def test_empty_and_refused_choices_produce_no_items() -> None:
    sdk = _sdk_client(_completion("", refusal="I can't help with that"))
    client = OpenAIChatClient(sdk, "gpt-4o")
    response = await client.get_structured_response(MESSAGES, SCHEMA)
    assert response.items == []
    assert response.first_text() is None


async def test_sdk_failure_becomes_provider_error() -> None:
    sdk = _sdk_client(error=openai.OpenAIError("connection reset"))
    client = OpenAIChatClient(sdk, "gpt-4o")
    with pytest.raises(ProviderError) as excinfo:
        await client.get_structured_response(MESSAGES, SCHEMA)
    assert isinstance(excinfo.value.__cause__, openai.OpenAIError)
    sdk.chat.completions.create.assert_awaited_once()
