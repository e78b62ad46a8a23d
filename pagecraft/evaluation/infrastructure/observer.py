"""Structlog implementation of the EvaluatorObserver port."""

import structlog


class StructlogEvaluatorObserver:
    """Delegates evaluator domain events to structlog.

    Satisfies the EvaluatorObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def evaluator_scoring_started(self, model: str, html_length: int) -> None:
        self._log.info(
            "evaluator.scoring_started", model=model, html_length=html_length
        )

    def evaluator_scoring_completed(
        self, model: str, overall_score: float, duration_ms: int
    ) -> None:
        self._log.info(
            "evaluator.scoring_completed",
            model=model,
            overall_score=overall_score,
            duration_ms=duration_ms,
        )

    def evaluator_scoring_failed(self, model: str, reason: str) -> None:
        self._log.error("evaluator.scoring_failed", model=model, reason=reason)
