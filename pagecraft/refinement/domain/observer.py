"""Observer port for the refinement loop — defines events in domain language."""

from typing import Protocol


class RefinementObserver(Protocol):
    """Observer port emitting phase transitions of the self-refine loop.

    Implementations may log to structlog, render progress, or record for tests.
    """

    def refinement_started(self, threshold: float, max_iterations: int) -> None: ...

    def refinement_initial_evaluated(
        self, overall_score: float, threshold: float
    ) -> None: ...

    def refinement_threshold_met(self, iteration: int, overall_score: float) -> None: ...

    def refinement_iteration_started(
        self, iteration: int, max_iterations: int, focus: list[str]
    ) -> None: ...

    def refinement_iteration_scored(
        self, iteration: int, overall_score: float, previous_score: float
    ) -> None: ...

    def refinement_best_updated(self, iteration: int, overall_score: float) -> None: ...

    def refinement_iteration_failed(
        self, iteration: int, reason: str, consecutive_failures: int
    ) -> None: ...

    def refinement_stopped_early(
        self, iteration: int, consecutive_failures: int
    ) -> None: ...

    def refinement_completed(
        self,
        iterations: int,
        final_score: float,
        score_improvement: float,
        improved: bool,
    ) -> None: ...


class NullRefinementObserver:
    """Discards every event. Used when a run is not verbose.

    Does NOT inherit from RefinementObserver (structural typing via Protocol).
    """

    def refinement_started(self, threshold: float, max_iterations: int) -> None:
        pass

    def refinement_initial_evaluated(
        self, overall_score: float, threshold: float
    ) -> None:
        pass

    def refinement_threshold_met(self, iteration: int, overall_score: float) -> None:
        pass

    def refinement_iteration_started(
        self, iteration: int, max_iterations: int, focus: list[str]
    ) -> None:
        pass

    def refinement_iteration_scored(
        self, iteration: int, overall_score: float, previous_score: float
    ) -> None:
        pass

    def refinement_best_updated(self, iteration: int, overall_score: float) -> None:
        pass

    def refinement_iteration_failed(
        self, iteration: int, reason: str, consecutive_failures: int
    ) -> None:
        pass

    def refinement_stopped_early(
        self, iteration: int, consecutive_failures: int
    ) -> None:
        pass

    def refinement_completed(
        self,
        iterations: int,
        final_score: float,
        score_improvement: float,
        improved: bool,
    ) -> None:
        pass


class RefinerObserver(Protocol):
    """Observer port for events emitted while an improved page is generated."""

    def refiner_generation_started(self, model: str, focus: list[str]) -> None: ...

    def refiner_generation_completed(
        self, model: str, html_length: int, duration_ms: int
    ) -> None: ...

    def refiner_generation_failed(self, model: str, reason: str) -> None: ...
