"""Human-readable reports and A/B comparison of design evaluations."""

from typing import Literal, TypeAlias

from pydantic import BaseModel

from pagecraft.evaluation.domain.evaluation import CRITERIA, DesignEvaluation

Winner: TypeAlias = Literal["A", "B", "tie"]

# Overall scores closer than this are reported as a tie.
_OVERALL_TIE_MARGIN = 0.5


class CriterionComparison(BaseModel, frozen=True):
    a: float
    b: float
    winner: Winner


class EvaluationComparison(BaseModel, frozen=True):
    """Outcome of comparing evaluation A against evaluation B."""

    winner: Winner
    score_difference: float
    criteria: dict[str, CriterionComparison]


def _format_score(score: float) -> str:
    return f"{score:g}"


def generate_evaluation_report(evaluation: DesignEvaluation) -> str:
    """Render *evaluation* as a Markdown report."""
    lines: list[str] = ["# Design Quality Evaluation Report", ""]

    lines.append(f"## Overall Score: {_format_score(evaluation.overall_score)}/5")
    lines.append("")
    lines.append("## Criteria Scores")
    lines.append("| Criterion | Score | Reasoning |")
    lines.append("|-----------|-------|-----------|")

    for key, label, _ in CRITERIA:
        criterion = getattr(evaluation.criteria, key)
        lines.append(
            f"| {label} | {_format_score(criterion.score)}/5 | {criterion.reasoning} |"
        )

    lines.append("")
    lines.append("## Overall Assessment")
    lines.append(evaluation.reasoning)
    lines.append("")

    if evaluation.suggestions:
        lines.append("## Suggestions for Improvement")
        for suggestion in evaluation.suggestions:
            lines.append(f"- {suggestion}")

    return "\n".join(lines)


def _winner(a: float, b: float) -> Winner:
    if a > b:
        return "A"
    if b > a:
        return "B"
    return "tie"


def compare_evaluations(
    evaluation_a: DesignEvaluation, evaluation_b: DesignEvaluation
) -> EvaluationComparison:
    """Compare two evaluations criterion by criterion.

    The overall winner needs a lead of more than 0.5; each criterion is won by
    any strict difference.
    """
    score_diff = evaluation_a.overall_score - evaluation_b.overall_score

    criteria: dict[str, CriterionComparison] = {}
    for key, _, _ in CRITERIA:
        score_a = getattr(evaluation_a.criteria, key).score
        score_b = getattr(evaluation_b.criteria, key).score
        criteria[key] = CriterionComparison(
            a=score_a, b=score_b, winner=_winner(score_a, score_b)
        )

    if score_diff > _OVERALL_TIE_MARGIN:
        winner: Winner = "A"
    elif score_diff < -_OVERALL_TIE_MARGIN:
        winner = "B"
    else:
        winner = "tie"

    return EvaluationComparison(
        winner=winner,
        score_difference=abs(score_diff),
        criteria=criteria,
    )
