"""Plain-text rendering of a story score."""

from __future__ import annotations

from typing import List

from ..rubric.schema import MAX_TOTAL_SCORE, CriteriaJudgment, StoryScore


def format_criteria(judgment: CriteriaJudgment) -> str:
    return f"{judgment.score.label}: {judgment.explanation}"


def format_areas_for_improvement(score: StoryScore) -> str:
    return "\n".join(f"• {area}" for area in score.areas_for_improvement)


def format_score_report(score: StoryScore) -> str:
    """Render ``score`` as a human-readable report."""
    lines: List[str] = [
        f"{dimension.value}: {format_criteria(judgment)}"
        for dimension, judgment in score.criteria.items()
    ]
    areas = format_areas_for_improvement(score)
    if areas:
        lines.extend(["", "Areas for improvement:", areas])
    lines.extend(
        [
            "",
            f"Total: {score.total_score}/{MAX_TOTAL_SCORE}",
            f"Overall: {score.overall.label} ({score.percentage_score}/100)",
        ]
    )
    return "\n".join(lines)
