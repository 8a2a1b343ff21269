"""
Storyflow: career story scoring.

This package scores a free-text career story against a fixed
six-dimension rubric (Relevance, Ownership, Complexity, Influence,
Outcome, Reflection) by delegating the judgment to an LLM chat endpoint.

The high-level flow is:

1. **rubric** – Typed score models, the strict JSON schema derived from
   them, and the prompt embedding rubric, schema and story.
2. **chat** – Provider-agnostic chat interface; the OpenAI
   implementation requests a schema-constrained completion.
3. **evaluate** – The evaluator parses and validates the model's answer
   into a `StoryScore`, reporting failures as an absent result; the
   session layer validates input and caches the last score.
4. **cli** – Command line entry point wiring the above together.
"""

from .errors import (  # noqa: F401
    ConfigurationError,
    EmptyResponse,
    ParseError,
    ProviderError,
    StoryEvaluationError,
)
from .rubric import CriteriaJudgment, CriteriaScore, Dimension, StoryScore  # noqa: F401
from .evaluate import EvaluationOutcome, StoryEvaluator, StorySession  # noqa: F401
