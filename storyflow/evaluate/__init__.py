"""
Evaluation subsystem.

* `llm_judge` – Sends the story to a chat model and validates the
  structured answer into a `StoryScore`.
* `session` – Caller-side validation and the single-slot result cache.
* `report` – Renders a score for display.
"""

from .llm_judge import EvaluationOutcome, StoryEvaluator, parse_story_score  # noqa: F401
from .session import StoryScoreCache, StorySession, validate_story_text  # noqa: F401
from .report import format_score_report  # noqa: F401
