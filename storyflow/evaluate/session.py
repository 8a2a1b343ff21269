"""
Story scoring session.

A :class:`StorySession` drives the evaluator on behalf of whoever edits
the story (the command line, or any other front end).  It validates the
text, and memoizes the most recent score in a single-slot
:class:`StoryScoreCache` so that asking for the score again without
editing the story does not trigger another billable provider call.

A session and its cache belong to one caller.  Overlapping ``score``
calls on the same session are serialised with an :class:`asyncio.Lock`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..errors import StoryEvaluationError
from ..rubric.schema import StoryScore
from .llm_judge import StoryEvaluator

logger = logging.getLogger(__name__)

MIN_STORY_LENGTH = 50
MAX_STORY_LENGTH = 5000
FAILURE_MESSAGE = "Failed to evaluate story. Please check your internet connection and try again."


def validate_story_text(text: str) -> Optional[str]:
    """Return a user-facing problem with ``text``, or ``None`` if it can be scored."""
    if not text or not text.strip():
        return "Please enter your story before scoring."
    if len(text) < MIN_STORY_LENGTH:
        return f"Story must be at least {MIN_STORY_LENGTH} characters long."
    if len(text) > MAX_STORY_LENGTH:
        return f"Story must be less than {MAX_STORY_LENGTH} characters long."
    return None


class StoryScoreCache:
    """Holds the score of the last evaluated story text."""

    def __init__(self) -> None:
        self._text: Optional[str] = None
        self._score: Optional[StoryScore] = None

    def get(self, text: str) -> Optional[StoryScore]:
        """Return the cached score if it was produced for exactly ``text``."""
        if self._score is not None and self._text == text:
            return self._score
        return None

    def store(self, text: str, score: StoryScore) -> None:
        self._text = text
        self._score = score

    def invalidate(self) -> None:
        self._text = None
        self._score = None

    @property
    def is_empty(self) -> bool:
        return self._score is None


class StorySession:
    """Editable story text plus its cached evaluation."""

    def __init__(self, evaluator: StoryEvaluator, story_text: str = "") -> None:
        self.evaluator = evaluator
        self.cache = StoryScoreCache()
        self._story_text = story_text
        self.error_message = ""
        self.last_error: Optional[StoryEvaluationError] = None
        self._lock = asyncio.Lock()
        self._busy = False

    @property
    def story_text(self) -> str:
        return self._story_text

    @story_text.setter
    def story_text(self, value: str) -> None:
        if value != self._story_text:
            self.cache.invalidate()
        self._story_text = value
        if self.has_error and value.strip():
            self.clear_error()

    @property
    def can_score(self) -> bool:
        return validate_story_text(self._story_text) is None

    @property
    def is_busy(self) -> bool:
        return self._busy

    @property
    def has_error(self) -> bool:
        return bool(self.error_message)

    def clear_error(self) -> None:
        self.error_message = ""
        self.last_error = None

    async def score(self) -> Optional[StoryScore]:
        """Score the current story text.

        Returns the cached score when the text has not changed since the
        last successful evaluation; otherwise calls the evaluator and
        caches a successful result.  On failure ``error_message`` is set
        and ``None`` is returned.
        """
        async with self._lock:
            text = self._story_text
            problem = validate_story_text(text)
            if problem is not None:
                self.error_message = problem
                return None

            self._busy = True
            self.clear_error()
            try:
                cached = self.cache.get(text)
                if cached is not None:
                    logger.info("Using cached score for unchanged story")
                    return cached

                outcome = await self.evaluator.evaluate(text)
                if not outcome.ok:
                    self.last_error = outcome.error
                    self.error_message = FAILURE_MESSAGE
                    return None

                self.cache.store(text, outcome.score)
                return outcome.score
            finally:
                self._busy = False
