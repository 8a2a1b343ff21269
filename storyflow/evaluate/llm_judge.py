"""
LLM story judging stage.

:class:`StoryEvaluator` scores a career story by asking a chat model for
a response constrained to the story score schema, then validating the
answer into a :class:`~storyflow.rubric.schema.StoryScore`.

Failures never escape :meth:`StoryEvaluator.evaluate`: a missing
credential, a provider failure, an empty answer or a payload that does
not match the schema are all reported as an :class:`EvaluationOutcome`
without a score, carrying the error for logging.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from ..chat.llm_providers import (
    ChatManager,
    JsonSchema,
    SystemMessage,
    UserMessage,
    get_default_chat_manager,
    resolve_model_name,
)
from ..errors import EmptyResponse, ParseError, StoryEvaluationError
from ..rubric.prompt import SYSTEM_PROMPT, build_prompt
from ..rubric.schema import StoryScore, story_score_schema

logger = logging.getLogger(__name__)

SCHEMA_NAME = "story_score"


@dataclass(frozen=True)
class EvaluationOutcome:
    """Result of one evaluation: either a score or the error that prevented it."""

    score: Optional[StoryScore] = None
    error: Optional[StoryEvaluationError] = None

    def __post_init__(self) -> None:
        if (self.score is None) == (self.error is None):
            raise ValueError("EvaluationOutcome needs exactly one of score or error")

    @classmethod
    def success(cls, score: StoryScore) -> "EvaluationOutcome":
        return cls(score=score)

    @classmethod
    def failure(cls, error: StoryEvaluationError) -> "EvaluationOutcome":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.score is not None

    @property
    def error_kind(self) -> Optional[str]:
        return self.error.kind if self.error is not None else None


def parse_story_score(payload: Optional[str]) -> StoryScore:
    """Validate a raw provider payload into a :class:`StoryScore`.

    Args:
        payload: JSON text returned by the model.

    Returns:
        The parsed score.

    Raises:
        EmptyResponse: If the payload is missing or blank.
        ParseError: If the payload is not valid JSON or does not match the
            schema (missing or unknown keys, out-of-range scores, wrong types).
    """
    if payload is None or not payload.strip():
        raise EmptyResponse("No response received from chat client")
    try:
        return StoryScore.model_validate_json(payload, strict=True)
    except ValidationError as exc:
        raise ParseError(
            f"Response does not match the story score schema ({exc.error_count()} errors)",
            payload=payload,
        ) from exc


class StoryEvaluator:
    """Scores career stories with a chat model.

    The evaluator holds no state between calls; each :meth:`evaluate` is
    independent.  The chat manager may be shared with other evaluators.
    """

    def __init__(self, chat_manager: ChatManager | None = None, model_name: str | None = None) -> None:
        self.chat_manager = chat_manager or get_default_chat_manager()
        self.model_name = resolve_model_name(model_name)

    async def request_story_score(self, story_text: str) -> StoryScore:
        """Run one provider round-trip and parse the answer.

        Raises:
            StoryEvaluationError: Any of the evaluation failure kinds.
        """
        schema = story_score_schema()
        prompt = build_prompt(story_text, schema)
        messages = [SystemMessage(SYSTEM_PROMPT), UserMessage(prompt)]
        logger.debug("Prompt: %s", prompt)

        client = self.chat_manager.get_client(self.model_name)
        response = await client.get_structured_response(
            messages, JsonSchema(schema, SCHEMA_NAME, strict=True)
        )
        payload = response.first_text()
        logger.debug("Response: %s", payload)
        return parse_story_score(payload)

    async def evaluate(self, story_text: str) -> EvaluationOutcome:
        """Evaluate ``story_text`` and return the outcome.

        Args:
            story_text: The career story.  Length and blankness checks are
                the caller's job.

        Returns:
            An :class:`EvaluationOutcome` holding the score, or the error
            when the evaluation failed.
        """
        logger.info("Evaluating story with %d characters using %s", len(story_text), self.model_name)
        try:
            score = await self.request_story_score(story_text)
        except ParseError as exc:
            logger.warning("Unparseable story score (%s): %s; payload: %s", exc.kind, exc, exc.payload)
            return EvaluationOutcome.failure(exc)
        except StoryEvaluationError as exc:
            logger.error("Story evaluation failed (%s): %s", exc.kind, exc)
            return EvaluationOutcome.failure(exc)
        logger.info(
            "Story scored %d/30 (%s)", score.total_score, score.overall.label
        )
        return EvaluationOutcome.success(score)
