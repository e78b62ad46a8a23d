"""RefinementOrchestrator — drives the evaluate → refine → re-evaluate loop."""

from pagecraft.core.errors import PortError
from pagecraft.evaluation.domain.context import RefinementContext
from pagecraft.evaluation.domain.evaluation import DesignEvaluation
from pagecraft.evaluation.domain.evaluator import Evaluator
from pagecraft.evaluation.domain.ranking import meets_quality_threshold, weakest_criteria
from pagecraft.evaluation.infrastructure.errors import EvaluationFailure
from pagecraft.refinement.domain.config import (
    DEFAULT_REFINEMENT_CONFIG,
    RefinementConfig,
    validate_refinement_config,
)
from pagecraft.refinement.domain.errors import InitialEvaluationError
from pagecraft.refinement.domain.observer import (
    NullRefinementObserver,
    RefinementObserver,
)
from pagecraft.refinement.domain.refiner import Refiner
from pagecraft.refinement.domain.result import RefinementResult
from pagecraft.refinement.infrastructure.errors import RefinementFailure

# Consecutive failed passes after which the loop gives up and returns its best.
MAX_CONSECUTIVE_FAILURES = 2


class RefinementOrchestrator:
    """Refines a generated page until it meets a quality threshold.

    The orchestrator receives its evaluator, refiner, and observer at
    construction and keeps no state between calls to refine(), so one instance
    may serve concurrent refinements of different pages.
    """

    def __init__(
        self,
        evaluator: Evaluator,
        refiner: Refiner,
        observer: RefinementObserver,
    ) -> None:
        self._evaluator = evaluator
        self._refiner = refiner
        self._observer = observer

    async def refine(
        self,
        html: str,
        context: RefinementContext,
        config: RefinementConfig = DEFAULT_REFINEMENT_CONFIG,
    ) -> RefinementResult:
        """Run the self-refine loop on *html* and return the best page found.

        Each pass ranks the current evaluation's criteria, asks the refiner for
        a candidate focused on the three weakest, and scores the candidate. The
        best page only changes on a strictly higher score. The candidate always
        becomes the input of the next pass, even after a regression. A failed
        pass leaves the current page untouched; after MAX_CONSECUTIVE_FAILURES
        failed passes in a row the loop stops and returns the best so far.

        Raises:
            ConfigurationError: if *config* is out of range. No port is called.
            InitialEvaluationError: if the starting page cannot be evaluated.
        """
        validate_refinement_config(config=config)
        observer: RefinementObserver = (
            self._observer if config.verbose else NullRefinementObserver()
        )

        observer.refinement_started(
            threshold=config.threshold, max_iterations=config.max_iterations
        )

        try:
            initial_evaluation = await self._evaluator.evaluate(
                html=html, context=context
            )
        except EvaluationFailure as exc:
            raise InitialEvaluationError(reason=str(exc)) from exc

        observer.refinement_initial_evaluated(
            overall_score=initial_evaluation.overall_score,
            threshold=config.threshold,
        )

        if meets_quality_threshold(initial_evaluation, config.threshold):
            observer.refinement_threshold_met(
                iteration=0, overall_score=initial_evaluation.overall_score
            )
            return self._complete(
                observer=observer,
                html=html,
                iterations=0,
                initial_evaluation=initial_evaluation,
                best_evaluation=initial_evaluation,
            )

        current_html = html
        current_evaluation = initial_evaluation
        best_html = html
        best_evaluation = initial_evaluation
        iterations = 0
        consecutive_failures = 0

        while iterations < config.max_iterations:
            iterations += 1
            focus = weakest_criteria(current_evaluation)
            observer.refinement_iteration_started(
                iteration=iterations,
                max_iterations=config.max_iterations,
                focus=[c.label for c in focus],
            )

            try:
                candidate_html = await self._refiner.refine(
                    html=current_html,
                    evaluation=current_evaluation,
                    focus=focus,
                    context=context,
                )
                if not candidate_html.strip():
                    raise RefinementFailure(reason="refiner returned an empty page")
                candidate_evaluation = await self._evaluator.evaluate(
                    html=candidate_html, context=context
                )
            except PortError as exc:
                consecutive_failures += 1
                observer.refinement_iteration_failed(
                    iteration=iterations,
                    reason=str(exc),
                    consecutive_failures=consecutive_failures,
                )
                if consecutive_failures >= MAX_CONSECUTIVE_FAILURES:
                    observer.refinement_stopped_early(
                        iteration=iterations,
                        consecutive_failures=consecutive_failures,
                    )
                    break
                continue

            consecutive_failures = 0
            observer.refinement_iteration_scored(
                iteration=iterations,
                overall_score=candidate_evaluation.overall_score,
                previous_score=current_evaluation.overall_score,
            )

            if candidate_evaluation.overall_score > best_evaluation.overall_score:
                best_html = candidate_html
                best_evaluation = candidate_evaluation
                observer.refinement_best_updated(
                    iteration=iterations,
                    overall_score=candidate_evaluation.overall_score,
                )

            if meets_quality_threshold(candidate_evaluation, config.threshold):
                observer.refinement_threshold_met(
                    iteration=iterations,
                    overall_score=candidate_evaluation.overall_score,
                )
                break

            current_html = candidate_html
            current_evaluation = candidate_evaluation

        return self._complete(
            observer=observer,
            html=best_html,
            iterations=iterations,
            initial_evaluation=initial_evaluation,
            best_evaluation=best_evaluation,
        )

    @staticmethod
    def _complete(
        observer: RefinementObserver,
        html: str,
        iterations: int,
        initial_evaluation: DesignEvaluation,
        best_evaluation: DesignEvaluation,
    ) -> RefinementResult:
        result = RefinementResult.from_best(
            html=html,
            iterations=iterations,
            initial_evaluation=initial_evaluation,
            best_evaluation=best_evaluation,
        )
        observer.refinement_completed(
            iterations=result.iterations,
            final_score=result.final_evaluation.overall_score,
            score_improvement=result.score_improvement,
            improved=result.improved,
        )
        return result
