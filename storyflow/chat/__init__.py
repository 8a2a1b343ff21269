"""
Chat provider layer.

Exposes the provider-agnostic chat interface used by the evaluator and
its OpenAI implementation.
"""

from .llm_providers import (  # noqa: F401
    ChatClient,
    ChatManager,
    ChatMessage,
    ChatResponse,
    ChatResponseItem,
    ChatResponseType,
    JsonSchema,
    OpenAIChatClient,
    OpenAIChatManager,
    SystemMessage,
    UserMessage,
    get_default_chat_manager,
    resolve_model_name,
)
