"""Evaluator Protocol — the port through which pages are scored."""

from typing import Protocol

from pagecraft.evaluation.domain.context import RefinementContext
from pagecraft.evaluation.domain.evaluation import DesignEvaluation


class Evaluator(Protocol):
    """Structural interface satisfied by any design judge.

    Implementations raise EvaluationFailure (or its ResponseValidationError
    subtype) rather than returning partial or untyped data.
    """

    async def evaluate(
        self, html: str, context: RefinementContext
    ) -> DesignEvaluation: ...
