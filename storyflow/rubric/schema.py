"""
Story score schema.

Defines the typed vocabulary of the career story rubric: the five-rank
:class:`CriteriaScore`, the six rubric :class:`Dimension` names, the
per-dimension :class:`CriteriaJudgment` and the aggregate
:class:`StoryScore` returned by the evaluator.

The models are pydantic models so that the same definition produces the
strict JSON schema sent to the LLM provider and validates the payload the
provider sends back.  Derived figures (total, percentage and overall
rank) are plain properties and never appear in the schema.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Dict, List, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

MAX_TOTAL_SCORE = 30


class CriteriaScore(IntEnum):
    """Ordinal rank for a rubric criterion, from 1 (Weak) to 5 (Excellent)."""

    WEAK = 1
    BELOW_AVERAGE = 2
    SOLID = 3
    STRONG = 4
    EXCELLENT = 5

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    CriteriaScore.WEAK: "Weak",
    CriteriaScore.BELOW_AVERAGE: "BelowAverage",
    CriteriaScore.SOLID: "Solid",
    CriteriaScore.STRONG: "Strong",
    CriteriaScore.EXCELLENT: "Excellent",
}

# Inclusive total-score ranges for the overall rank.
_OVERALL_BUCKETS: List[Tuple[int, int, CriteriaScore]] = [
    (1, 6, CriteriaScore.WEAK),
    (7, 12, CriteriaScore.BELOW_AVERAGE),
    (13, 18, CriteriaScore.SOLID),
    (19, 24, CriteriaScore.STRONG),
    (25, 30, CriteriaScore.EXCELLENT),
]


def overall_for_total(total: int) -> CriteriaScore:
    """Map a total score onto the overall rank.

    Totals outside ``[1, 30]`` fall back to :attr:`CriteriaScore.WEAK`.
    """
    for low, high, rank in _OVERALL_BUCKETS:
        if low <= total <= high:
            return rank
    return CriteriaScore.WEAK


class Dimension(str, Enum):
    """The six rubric dimensions, in schema order."""

    RELEVANCE = "Relevance"
    OWNERSHIP = "Ownership"
    COMPLEXITY = "Complexity"
    INFLUENCE = "Influence"
    OUTCOME = "Outcome"
    REFLECTION = "Reflection"

    @property
    def field_name(self) -> str:
        return self.value.lower()


class CriteriaJudgment(BaseModel):
    """Score and explanation for one rubric dimension."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    score: CriteriaScore = Field(alias="Score")
    explanation: str = Field(alias="Explanation")

    @field_validator("explanation")
    @classmethod
    def _explanation_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("explanation must not be blank")
        return value


class StoryScore(BaseModel):
    """Evaluation of a career story against the six-dimension rubric."""

    model_config = ConfigDict(extra="forbid", frozen=True, title="story_score")

    relevance: CriteriaJudgment = Field(alias="Relevance")
    ownership: CriteriaJudgment = Field(alias="Ownership")
    complexity: CriteriaJudgment = Field(alias="Complexity")
    influence: CriteriaJudgment = Field(alias="Influence")
    outcome: CriteriaJudgment = Field(alias="Outcome")
    reflection: CriteriaJudgment = Field(alias="Reflection")
    # Older payloads misspell the key; accept both, always emit the correct one.
    areas_for_improvement: Tuple[str, ...] = Field(
        alias="AreasForImprovement",
        validation_alias=AliasChoices("AreasForImprovement", "AreasForImprovment"),
        title="AreasForImprovement",
    )

    @model_validator(mode="before")
    @classmethod
    def _single_areas_key(cls, data: Any) -> Any:
        if isinstance(data, dict) and {"AreasForImprovement", "AreasForImprovment"} <= data.keys():
            raise ValueError("areas for improvement given under two keys")
        return data

    @property
    def criteria(self) -> Dict[Dimension, CriteriaJudgment]:
        """Judgments keyed by dimension, in rubric order."""
        return {dimension: self.judgment(dimension) for dimension in Dimension}

    def judgment(self, dimension: Dimension) -> CriteriaJudgment:
        return getattr(self, Dimension(dimension).field_name)

    @property
    def total_score(self) -> int:
        return sum(int(judgment.score) for judgment in self.criteria.values())

    @property
    def percentage_score(self) -> int:
        # Totals are multiples of 1/30, so the quotient never lands on .5.
        return round(self.total_score / MAX_TOTAL_SCORE * 100)

    @property
    def overall(self) -> CriteriaScore:
        return overall_for_total(self.total_score)

    def to_json(self, indent: int | None = None) -> str:
        """Serialize using the wire key names."""
        return self.model_dump_json(by_alias=True, indent=indent)

    def to_summary(self) -> Dict[str, Any]:
        """Wire representation plus the derived figures."""
        data = self.model_dump(mode="json", by_alias=True)
        data["TotalScore"] = self.total_score
        data["PercentageScore"] = self.percentage_score
        data["Overall"] = self.overall.label
        return data


def _without_descriptions(node: Any) -> Any:
    if isinstance(node, list):
        return [_without_descriptions(item) for item in node]
    if not isinstance(node, dict):
        return node
    cleaned: Dict[str, Any] = {}
    for key, value in node.items():
        if key == "description":
            continue
        # "properties" and "$defs" map names to schemas; the names are kept as-is.
        if key in ("properties", "$defs"):
            cleaned[key] = {name: _without_descriptions(sub) for name, sub in value.items()}
        else:
            cleaned[key] = _without_descriptions(value)
    return cleaned


def story_score_schema() -> Dict[str, Any]:
    """Return the strict JSON schema document describing :class:`StoryScore`.

    Class docstrings are stripped so only wire names reach the provider.
    """
    return _without_descriptions(StoryScore.model_json_schema(by_alias=True))
