"""Structlog implementations of the refinement observer ports."""

import structlog


class StructlogRefinementObserver:
    """Logs self-refine loop events to structlog.

    Does NOT inherit from RefinementObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def refinement_started(self, threshold: float, max_iterations: int) -> None:
        self._log.info(
            "refinement.started", threshold=threshold, max_iterations=max_iterations
        )

    def refinement_initial_evaluated(
        self, overall_score: float, threshold: float
    ) -> None:
        self._log.info(
            "refinement.initial_evaluated",
            overall_score=overall_score,
            threshold=threshold,
        )

    def refinement_threshold_met(self, iteration: int, overall_score: float) -> None:
        self._log.info(
            "refinement.threshold_met",
            iteration=iteration,
            overall_score=overall_score,
        )

    def refinement_iteration_started(
        self, iteration: int, max_iterations: int, focus: list[str]
    ) -> None:
        self._log.info(
            "refinement.iteration_started",
            iteration=iteration,
            max_iterations=max_iterations,
            focus=focus,
        )

    def refinement_iteration_scored(
        self, iteration: int, overall_score: float, previous_score: float
    ) -> None:
        self._log.info(
            "refinement.iteration_scored",
            iteration=iteration,
            overall_score=overall_score,
            previous_score=previous_score,
        )

    def refinement_best_updated(self, iteration: int, overall_score: float) -> None:
        self._log.info(
            "refinement.best_updated",
            iteration=iteration,
            overall_score=overall_score,
        )

    def refinement_iteration_failed(
        self, iteration: int, reason: str, consecutive_failures: int
    ) -> None:
        self._log.warning(
            "refinement.iteration_failed",
            iteration=iteration,
            reason=reason,
            consecutive_failures=consecutive_failures,
        )

    def refinement_stopped_early(
        self, iteration: int, consecutive_failures: int
    ) -> None:
        self._log.error(
            "refinement.stopped_early",
            iteration=iteration,
            consecutive_failures=consecutive_failures,
        )

    def refinement_completed(
        self,
        iterations: int,
        final_score: float,
        score_improvement: float,
        improved: bool,
    ) -> None:
        self._log.info(
            "refinement.completed",
            iterations=iterations,
            final_score=final_score,
            score_improvement=round(score_improvement, 3),
            improved=improved,
        )


class StructlogRefinerObserver:
    """Delegates refiner domain events to structlog.

    Satisfies the RefinerObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def refiner_generation_started(self, model: str, focus: list[str]) -> None:
        self._log.info("refiner.generation_started", model=model, focus=focus)

    def refiner_generation_completed(
        self, model: str, html_length: int, duration_ms: int
    ) -> None:
        self._log.info(
            "refiner.generation_completed",
            model=model,
            html_length=html_length,
            duration_ms=duration_ms,
        )

    def refiner_generation_failed(self, model: str, reason: str) -> None:
        self._log.error("refiner.generation_failed", model=model, reason=reason)
