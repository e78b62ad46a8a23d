"""CompositeRefinementObserver — fans out all events to a list of observers."""

from pagecraft.refinement.domain.observer import RefinementObserver


class CompositeRefinementObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from RefinementObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[RefinementObserver]) -> None:
        self._observers = observers

    def refinement_started(self, threshold: float, max_iterations: int) -> None:
        for obs in self._observers:
            obs.refinement_started(threshold=threshold, max_iterations=max_iterations)

    def refinement_initial_evaluated(
        self, overall_score: float, threshold: float
    ) -> None:
        for obs in self._observers:
            obs.refinement_initial_evaluated(
                overall_score=overall_score, threshold=threshold
            )

    def refinement_threshold_met(self, iteration: int, overall_score: float) -> None:
        for obs in self._observers:
            obs.refinement_threshold_met(
                iteration=iteration, overall_score=overall_score
            )

    def refinement_iteration_started(
        self, iteration: int, max_iterations: int, focus: list[str]
    ) -> None:
        for obs in self._observers:
            obs.refinement_iteration_started(
                iteration=iteration, max_iterations=max_iterations, focus=focus
            )

    def refinement_iteration_scored(
        self, iteration: int, overall_score: float, previous_score: float
    ) -> None:
        for obs in self._observers:
            obs.refinement_iteration_scored(
                iteration=iteration,
                overall_score=overall_score,
                previous_score=previous_score,
            )

    def refinement_best_updated(self, iteration: int, overall_score: float) -> None:
        for obs in self._observers:
            obs.refinement_best_updated(
                iteration=iteration, overall_score=overall_score
            )

    def refinement_iteration_failed(
        self, iteration: int, reason: str, consecutive_failures: int
    ) -> None:
        for obs in self._observers:
            obs.refinement_iteration_failed(
                iteration=iteration,
                reason=reason,
                consecutive_failures=consecutive_failures,
            )

    def refinement_stopped_early(
        self, iteration: int, consecutive_failures: int
    ) -> None:
        for obs in self._observers:
            obs.refinement_stopped_early(
                iteration=iteration, consecutive_failures=consecutive_failures
            )

    def refinement_completed(
        self,
        iterations: int,
        final_score: float,
        score_improvement: float,
        improved: bool,
    ) -> None:
        for obs in self._observers:
            obs.refinement_completed(
                iterations=iterations,
                final_score=final_score,
                score_improvement=score_improvement,
                improved=improved,
            )
