"""Refiner Protocol — the port through which improved pages are generated."""

from typing import Protocol

from pagecraft.evaluation.domain.context import RefinementContext
from pagecraft.evaluation.domain.evaluation import DesignEvaluation
from pagecraft.evaluation.domain.ranking import RankedCriterion


class Refiner(Protocol):
    """Structural interface satisfied by any page refiner.

    ``focus`` holds the weakest criteria of ``evaluation``, lowest first.
    Implementations raise RefinementFailure on provider or output errors.
    """

    async def refine(
        self,
        html: str,
        evaluation: DesignEvaluation,
        focus: list[RankedCriterion],
        context: RefinementContext,
    ) -> str: ...
