"""FakeEvaluator — in-memory Evaluator implementation for use in tests."""

from pagecraft.evaluation.domain.context import RefinementContext
from pagecraft.evaluation.domain.evaluation import (
    CriterionScore,
    DesignEvaluation,
    EvaluationCriteria,
)


def make_evaluation(
    overall_score: float,
    aesthetics: float | None = None,
    modernity: float | None = None,
    repository_fit: float | None = None,
    usability: float | None = None,
    consistency: float | None = None,
    suggestions: list[str] | None = None,
) -> DesignEvaluation:
    """Build a DesignEvaluation; criteria default to the overall score."""

    def _criterion(score: float | None, name: str) -> CriterionScore:
        return CriterionScore(
            score=overall_score if score is None else score,
            reasoning=f"{name} reasoning.",
        )

    return DesignEvaluation(
        overall_score=overall_score,
        criteria=EvaluationCriteria(
            aesthetics=_criterion(aesthetics, "Aesthetics"),
            modernity=_criterion(modernity, "Modernity"),
            repository_fit=_criterion(repository_fit, "Repository fit"),
            usability=_criterion(usability, "Usability"),
            consistency=_criterion(consistency, "Consistency"),
        ),
        reasoning="Overall reasoning.",
        suggestions=suggestions
        if suggestions is not None
        else ["Improve colors", "Add more whitespace"],
    )


class FakeEvaluator:
    """Satisfies the Evaluator protocol.

    Returns (or raises) the scripted outcomes in order, one per call.
    """

    def __init__(self, outcomes: list[DesignEvaluation | Exception]) -> None:
        self._outcomes = list(outcomes)
        self.evaluated_html: list[str] = []
        self.contexts: list[RefinementContext] = []

    async def evaluate(
        self, html: str, context: RefinementContext
    ) -> DesignEvaluation:
        self.evaluated_html.append(html)
        self.contexts.append(context)
        if not self._outcomes:
            raise AssertionError("FakeEvaluator received an unscripted call")
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
