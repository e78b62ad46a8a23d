"""Threshold checks and weakest-criteria selection over a DesignEvaluation."""

from pydantic import BaseModel

from pagecraft.evaluation.domain.evaluation import (
    CRITERIA,
    CriterionKey,
    CriterionScore,
    DesignEvaluation,
)

DEFAULT_QUALITY_THRESHOLD = 3.0
FOCUS_CRITERIA_COUNT = 3


class RankedCriterion(BaseModel, frozen=True):
    """One criterion selected as a focus for the next refinement pass."""

    key: CriterionKey
    label: str
    score: float
    reasoning: str


def meets_quality_threshold(
    evaluation: DesignEvaluation, threshold: float = DEFAULT_QUALITY_THRESHOLD
) -> bool:
    return evaluation.overall_score >= threshold


def weakest_criteria(
    evaluation: DesignEvaluation, count: int = FOCUS_CRITERIA_COUNT
) -> list[RankedCriterion]:
    """Return the *count* lowest-scoring criteria, lowest first.

    sorted() is stable, so criteria with equal scores keep their declared
    order and the selection is reproducible for identical input.
    """
    ranked: list[RankedCriterion] = []
    for key, label, _ in CRITERIA:
        criterion: CriterionScore = getattr(evaluation.criteria, key)
        ranked.append(
            RankedCriterion(
                key=key,
                label=label,
                score=criterion.score,
                reasoning=criterion.reasoning,
            )
        )
    ranked.sort(key=lambda c: c.score)
    return ranked[:count]
