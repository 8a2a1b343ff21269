"""
Rubric vocabulary and prompt construction.

* `schema` – Typed story score models and the strict JSON schema sent to
  the LLM provider.
* `prompt` – Builds the instruction text embedding the rubric, the
  schema and the story.
"""

from .schema import (  # noqa: F401
    CriteriaJudgment,
    CriteriaScore,
    Dimension,
    StoryScore,
    overall_for_total,
    story_score_schema,
)
from .prompt import SYSTEM_PROMPT, build_prompt  # noqa: F401
