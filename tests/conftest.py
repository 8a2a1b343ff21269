"""Shared fixtures: a recording chat manager double and sample payloads."""

from __future__ import annotations

import json
from typing import List, Optional, Sequence

import pytest

from storyflow.chat.llm_providers import (
    ChatClient,
    ChatManager,
    ChatMessage,
    ChatResponse,
    ChatResponseItem,
    JsonSchema,
)

SAMPLE_PAYLOAD = json.dumps(
    {
        "Relevance": {"Score": 5, "Explanation": "Relevant"},
        "Ownership": {"Score": 4, "Explanation": "Owned"},
        "Complexity": {"Score": 3, "Explanation": "Complex"},
        "Influence": {"Score": 2, "Explanation": "Influenced"},
        "Outcome": {"Score": 1, "Explanation": "Outcome"},
        "Reflection": {"Score": 4, "Explanation": "Reflected"},
        "AreasForImprovment": ["Improve X"],
    }
)

LONG_STORY = (
    "When our payments service started timing out during peak traffic, I led a "
    "small team to profile the hot paths, rewrote the retry logic and cut p99 "
    "latency by forty percent within two sprints."
)


class FakeChatClient(ChatClient):
    def __init__(self, manager: "FakeChatManager", model_name: str) -> None:
        self.manager = manager
        self.model_name = model_name

    async def get_structured_response(
        self, messages: Sequence[ChatMessage], schema: JsonSchema
    ) -> ChatResponse:
        self.manager.requests.append((self.model_name, list(messages), schema))
        if self.manager.error is not None:
            raise self.manager.error
        return ChatResponse([ChatResponseItem(text) for text in self.manager.payloads])


class FakeChatManager(ChatManager):
    """Chat manager returning canned payloads and recording every request."""

    def __init__(self, payloads: Sequence[str] = (), error: Optional[Exception] = None) -> None:
        self.payloads: List[str] = list(payloads)
        self.error = error
        self.requests: list = []

    def get_client(self, model_name: str) -> ChatClient:
        return FakeChatClient(self, model_name)


@pytest.fixture(autouse=True)
def _clean_openai_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("OPENAI_MODEL", "OPENAI_BASE_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_payload() -> str:
    return SAMPLE_PAYLOAD


@pytest.fixture
def long_story() -> str:
    return LONG_STORY


@pytest.fixture
def fake_manager() -> FakeChatManager:
    return FakeChatManager([SAMPLE_PAYLOAD])


@pytest.fixture
def make_manager():
    return FakeChatManager
