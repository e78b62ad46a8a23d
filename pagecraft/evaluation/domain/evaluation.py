"""DesignEvaluation — the judge's structured verdict on one generated page."""

from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field, StrictStr

CriterionKey: TypeAlias = str


class CriterionScore(BaseModel):
    """Score and reasoning for a single rubric criterion."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(ge=1, le=5, strict=True)
    reasoning: StrictStr = Field(min_length=1)


class EvaluationCriteria(BaseModel):
    """The five rubric criteria. All are required; none may be omitted.

    Field order is the declared criterion order used to break ranking ties.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    aesthetics: CriterionScore
    modernity: CriterionScore
    repository_fit: CriterionScore = Field(alias="repositoryFit")
    usability: CriterionScore
    consistency: CriterionScore


class DesignEvaluation(BaseModel):
    """Immutable verdict of the design judge.

    Accepts the camelCase wire names the judge replies with (``overallScore``,
    ``repositoryFit``) as well as the Python field names. Scores outside
    [1, 5] are rejected rather than clamped.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    overall_score: float = Field(alias="overallScore", ge=1, le=5, strict=True)
    criteria: EvaluationCriteria
    reasoning: StrictStr = Field(min_length=1)
    suggestions: list[StrictStr]


# Declared order: (field name, display label, rubric description).
CRITERIA: tuple[tuple[CriterionKey, str, str], ...] = (
    (
        "aesthetics",
        "Aesthetics",
        "How visually appealing is the design? Consider color harmony, spacing, "
        "typography, and overall polish.",
    ),
    (
        "modernity",
        "Modernity",
        "Does the design feel modern and current? Consider trends like "
        "minimalism, clean layouts, and contemporary UI patterns.",
    ),
    (
        "repository_fit",
        "Repository Fit",
        "How well does the design match the repository's purpose, audience, "
        "and technical domain?",
    ),
    (
        "usability",
        "Usability",
        "Is the site easy to navigate and understand? Consider information "
        "hierarchy, readability, and user flow.",
    ),
    (
        "consistency",
        "Consistency",
        "Is the design consistent throughout? Consider visual language, "
        "component styling, and spacing.",
    ),
)
