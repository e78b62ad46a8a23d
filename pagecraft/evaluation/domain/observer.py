"""EvaluatorObserver port — domain events emitted while a page is judged."""

from typing import Protocol


class EvaluatorObserver(Protocol):
    """Observer port for evaluator events.

    Implementations may log to structlog or record for tests.
    """

    def evaluator_scoring_started(self, model: str, html_length: int) -> None: ...

    def evaluator_scoring_completed(
        self, model: str, overall_score: float, duration_ms: int
    ) -> None: ...

    def evaluator_scoring_failed(self, model: str, reason: str) -> None: ...
