"""
Prompt construction for story scoring.

The prompt embeds the rubric, the serialized response schema and the
story text verbatim.  Construction is deterministic: the same story and
schema always produce the same prompt.
"""

from __future__ import annotations

import json
from typing import Any, Dict

SYSTEM_PROMPT = (
    "You are an expert in evaluating career stories using the STAR format rubric. "
    "Your task is to provide a detailed evaluation of the story provided in the next "
    "message. Your standards are high, you will be critical yet fair."
)

RUBRIC_DIMENSIONS = (
    ("Relevance", "Does the story align with common expectations for engineering leadership roles?"),
    ("Ownership", "Are the goal and the actions clearly stated and owned by the person telling the story?"),
    ("Complexity", "Does the story involve scale, ambiguity or navigating difficult challenges?"),
    ("Influence", "Did the person influence others, across or beyond their own team?"),
    ("Outcome", "Are the results measurable, observable and tied to the actions taken?"),
    ("Reflection", "Does the person reflect on what they learned or would do differently?"),
)


def build_prompt(story_text: str, schema: Dict[str, Any]) -> str:
    """Build the user prompt asking the model to score ``story_text``.

    Args:
        story_text: The career story, embedded without modification.
        schema: JSON schema document the response must follow.

    Returns:
        The full prompt string.
    """
    rubric = "\n".join(f"- {name}: {question}" for name, question in RUBRIC_DIMENSIONS)
    schema_text = json.dumps(schema, indent=2, sort_keys=True)
    return (
        "Please critically evaluate the following career story using the STAR format rubric. "
        "Rate each of the listed dimensions on a scale from 1 (Weak) to 5 (Excellent), and "
        "provide a short explanation for each rating. At the end, suggest 1-2 areas for "
        "improvement. Format the response as JSON using the specific schema.\n\n"
        "Rubric Dimensions\n"
        f"{rubric}\n\n"
        "JSON Schema\n"
        f"{schema_text}\n\n"
        "Career Story\n"
        f"{story_text}\n"
    )
