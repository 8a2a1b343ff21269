"""
Error taxonomy for story evaluation.

Every failure the evaluation pipeline can report derives from
:class:`StoryEvaluationError`.  The lower layers raise these exceptions
and :class:`storyflow.evaluate.llm_judge.StoryEvaluator` recovers them
into an absent result, keeping the ``kind`` for logging.
"""

from __future__ import annotations

from typing import Optional


class StoryEvaluationError(Exception):
    """Base class for recoverable evaluation failures."""

    kind = "evaluation_error"


class ConfigurationError(StoryEvaluationError, ValueError):
    """The provider credential is missing or blank."""

    kind = "configuration_error"


class ProviderError(StoryEvaluationError, RuntimeError):
    """Transport, authentication or provider-side failure."""

    kind = "provider_error"


class EmptyResponse(StoryEvaluationError):
    """The provider answered without any content items."""

    kind = "empty_response"


class ParseError(StoryEvaluationError):
    """The payload does not conform to the story score schema."""

    kind = "parse_error"

    def __init__(self, message: str, payload: Optional[str] = None) -> None:
        super().__init__(message)
        self.payload = payload
