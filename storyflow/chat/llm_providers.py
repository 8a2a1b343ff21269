"""
Chat provider abstractions.

This module defines the interface the story evaluator uses to obtain a
schema-constrained completion from a large language model, without
depending on a particular provider.  A :class:`ChatManager` resolves a
:class:`ChatClient` for a named model; the client sends an ordered list
of messages together with a JSON schema and returns the text items of
the answer.

The production implementation talks to the OpenAI chat completions API
through the official async SDK.  The API key is read from the
``OPENAI_API_KEY`` environment variable unless passed explicitly, the
model from ``OPENAI_MODEL`` (default ``gpt-4o``) and an optional
endpoint override from ``OPENAI_BASE_URL``.

Clients do not validate that the answer conforms to the schema and do
not retry; both are left to the caller.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Sequence

import openai
from openai import AsyncOpenAI

from ..errors import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"


class ChatRole(str, Enum):
    SYSTEM = "system"
    USER = "user"


@dataclass(frozen=True)
class ChatMessage:
    """A single message in a chat request."""

    content: str
    role: ClassVar[ChatRole]

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class SystemMessage(ChatMessage):
    role: ClassVar[ChatRole] = ChatRole.SYSTEM


@dataclass(frozen=True)
class UserMessage(ChatMessage):
    role: ClassVar[ChatRole] = ChatRole.USER


@dataclass(frozen=True)
class JsonSchema:
    """Response format directive: a JSON schema document and its name."""

    definition: Dict[str, Any]
    name: str
    strict: bool = True


class ChatResponseType(str, Enum):
    TEXT = "text"


@dataclass(frozen=True)
class ChatResponseItem:
    text: str
    response_type: ChatResponseType = ChatResponseType.TEXT


@dataclass(frozen=True)
class ChatResponse:
    """Ordered text items returned by the provider."""

    items: List[ChatResponseItem] = field(default_factory=list)

    def first_text(self) -> Optional[str]:
        for item in self.items:
            if item.response_type is ChatResponseType.TEXT:
                return item.text
        return None


class ChatClient(ABC):
    """Handle on a single model able to return schema-constrained answers."""

    @abstractmethod
    async def get_structured_response(
        self, messages: Sequence[ChatMessage], schema: JsonSchema
    ) -> ChatResponse:
        """Send ``messages`` and ask for output following ``schema``.

        Raises:
            ProviderError: On transport, authentication or provider-side failure.
        """
        raise NotImplementedError


class ChatManager(ABC):
    """Resolves chat clients by model name."""

    @abstractmethod
    def get_client(self, model_name: str) -> ChatClient:
        """Return a client for ``model_name`` without contacting the provider."""
        raise NotImplementedError


class OpenAIChatClient(ChatClient):
    """Client that uses the OpenAI chat completions API."""

    def __init__(self, client: AsyncOpenAI, model_name: str) -> None:
        self.client = client
        self.model_name = model_name

    async def get_structured_response(
        self, messages: Sequence[ChatMessage], schema: JsonSchema
    ) -> ChatResponse:
        response_format = {
            "type": "json_schema",
            "json_schema": {
                "name": schema.name,
                "schema": schema.definition,
                "strict": schema.strict,
            },
        }
        logger.debug("Sending %d messages to OpenAI model %s", len(messages), self.model_name)
        try:
            completion = await self.client.chat.completions.create(
                model=self.model_name,
                messages=[message.to_dict() for message in messages],
                response_format=response_format,
            )
        except openai.OpenAIError as exc:
            raise ProviderError(f"OpenAI request failed: {exc}") from exc

        items: List[ChatResponseItem] = []
        for choice in completion.choices or []:
            message = choice.message
            refusal = getattr(message, "refusal", None)
            if refusal:
                logger.warning("OpenAI model %s refused the request: %s", self.model_name, refusal)
                continue
            if message.content:
                items.append(ChatResponseItem(message.content))
        return ChatResponse(items)


class OpenAIChatManager(ChatManager):
    """Manager creating OpenAI chat clients over one shared SDK client.

    The underlying :class:`openai.AsyncOpenAI` instance is created on the
    first call to :meth:`get_client` and shared by every client handed out,
    so concurrent requests reuse its connection pool.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else os.getenv("OPENAI_API_KEY")
        self.base_url = base_url or os.getenv("OPENAI_BASE_URL") or None
        self._client = client

    def get_client(self, model_name: str) -> ChatClient:
        if not model_name or not model_name.strip():
            raise ConfigurationError("model name must not be blank")
        if self._client is None:
            if not self.api_key or not self.api_key.strip():
                raise ConfigurationError("OPENAI_API_KEY not provided")
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return OpenAIChatClient(self._client, model_name)


def resolve_model_name(model: str | None = None) -> str:
    """Return the model to use: explicit argument > ``OPENAI_MODEL`` > default."""
    return model or os.getenv("OPENAI_MODEL") or DEFAULT_MODEL


def get_default_chat_manager() -> ChatManager:
    """Return the chat manager configured from the environment."""
    return OpenAIChatManager()
