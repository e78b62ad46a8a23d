"""RefinementResult — the outcome of one self-refine invocation."""

from pydantic import BaseModel, Field

from pagecraft.evaluation.domain.evaluation import DesignEvaluation

# Score gains at or below this are treated as floating-point noise.
IMPROVEMENT_EPSILON = 0.001


class RefinementResult(BaseModel, frozen=True):
    """Best page found plus the evaluations that bracket the run."""

    html: str
    iterations: int = Field(ge=0)
    initial_evaluation: DesignEvaluation
    final_evaluation: DesignEvaluation
    improved: bool
    score_improvement: float

    @classmethod
    def from_best(
        cls,
        html: str,
        iterations: int,
        initial_evaluation: DesignEvaluation,
        best_evaluation: DesignEvaluation,
    ) -> "RefinementResult":
        score_improvement = (
            best_evaluation.overall_score - initial_evaluation.overall_score
        )
        return cls(
            html=html,
            iterations=iterations,
            initial_evaluation=initial_evaluation,
            final_evaluation=best_evaluation,
            improved=score_improvement > IMPROVEMENT_EPSILON,
            score_improvement=score_improvement,
        )
