"""Tests for RefinementOrchestrator — the evaluate → refine → re-evaluate loop."""

import pytest

from pagecraft.evaluation.infrastructure.errors import (
    EvaluationFailure,
    ResponseValidationError,
)
from pagecraft.refinement.application.orchestrator import (
    MAX_CONSECUTIVE_FAILURES,
    RefinementOrchestrator,
)
from pagecraft.refinement.domain.config import RefinementConfig
from pagecraft.refinement.domain.errors import (
    ConfigurationError,
    InitialEvaluationError,
    InvalidIterationCapError,
    InvalidThresholdError,
)
from pagecraft.refinement.infrastructure.errors import (
    InvalidHtmlResponseError,
    RefinementFailure,
)
from tests.evaluation.fake_evaluator import FakeEvaluator, make_evaluation
from tests.fake_context import make_context
from tests.refinement.fake_observer import FakeRefinementObserver
from tests.refinement.fake_refiner import FakeRefiner

INITIAL_HTML = "<!DOCTYPE html><html><body>initial</body></html>"
PAGE_1 = "<!DOCTYPE html><html><body>page 1</body></html>"
PAGE_2 = "<!DOCTYPE html><html><body>page 2</body></html>"
PAGE_3 = "<!DOCTYPE html><html><body>page 3</body></html>"


def _make_orchestrator(
    evaluator: FakeEvaluator,
    refiner: FakeRefiner,
    observer: FakeRefinementObserver | None = None,
) -> RefinementOrchestrator:
    return RefinementOrchestrator(
        evaluator=evaluator,
        refiner=refiner,
        observer=observer if observer is not None else FakeRefinementObserver(),
    )


class TestFastPath:
    async def test_initial_page_meeting_threshold_is_returned_unchanged(
        self,
    ) -> None:
        evaluator = FakeEvaluator([make_evaluation(4.0)])
        refiner = FakeRefiner([])
        orchestrator = _make_orchestrator(evaluator, refiner)

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=3.5, max_iterations=3),
        )

        assert result.html == INITIAL_HTML
        assert result.iterations == 0
        assert result.improved is False
        assert result.score_improvement == 0.0
        assert result.final_evaluation == result.initial_evaluation

    async def test_fast_path_makes_exactly_one_evaluator_call_and_no_refiner_call(
        self,
    ) -> None:
        evaluator = FakeEvaluator([make_evaluation(4.0)])
        refiner = FakeRefiner([])
        orchestrator = _make_orchestrator(evaluator, refiner)

        await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=3.5),
        )

        assert evaluator.evaluated_html == [INITIAL_HTML]
        assert refiner.calls == []

    async def test_score_equal_to_threshold_meets_it(self) -> None:
        evaluator = FakeEvaluator([make_evaluation(3.5)])
        orchestrator = _make_orchestrator(evaluator, FakeRefiner([]))

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=3.5),
        )

        assert result.iterations == 0

    async def test_fast_path_emits_threshold_met_at_iteration_zero(self) -> None:
        observer = FakeRefinementObserver()
        orchestrator = _make_orchestrator(
            FakeEvaluator([make_evaluation(4.5)]), FakeRefiner([]), observer
        )

        await orchestrator.refine(html=INITIAL_HTML, context=make_context())

        assert observer.events == [
            "started",
            "initial_evaluated",
            "threshold_met",
            "completed",
        ]
        assert observer.threshold_met == [0]


class TestSuccessfulRefinement:
    async def test_single_pass_reaching_threshold(self) -> None:
        evaluator = FakeEvaluator([make_evaluation(2.5), make_evaluation(4.0)])
        refiner = FakeRefiner([PAGE_1])
        orchestrator = _make_orchestrator(evaluator, refiner)

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=3.5, max_iterations=2),
        )

        assert result.html == PAGE_1
        assert result.iterations == 1
        assert result.improved is True
        assert result.score_improvement == pytest.approx(1.5)
        assert result.initial_evaluation.overall_score == 2.5
        assert result.final_evaluation.overall_score == 4.0
        assert len(refiner.calls) == 1

    async def test_best_page_is_kept_when_later_pass_regresses(self) -> None:
        evaluator = FakeEvaluator(
            [make_evaluation(2.0), make_evaluation(3.5), make_evaluation(2.5)]
        )
        refiner = FakeRefiner([PAGE_1, PAGE_2])
        orchestrator = _make_orchestrator(evaluator, refiner)

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=5.0, max_iterations=2),
        )

        assert result.html == PAGE_1
        assert result.final_evaluation.overall_score == 3.5
        assert result.iterations == 2
        assert result.improved is True
        assert result.score_improvement == pytest.approx(1.5)

    async def test_regressed_candidate_still_feeds_the_next_pass(self) -> None:
        evaluator = FakeEvaluator(
            [
                make_evaluation(2.0),
                make_evaluation(3.0),
                make_evaluation(2.5),
                make_evaluation(2.8),
            ]
        )
        refiner = FakeRefiner([PAGE_1, PAGE_2, PAGE_3])
        orchestrator = _make_orchestrator(evaluator, refiner)

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=5.0, max_iterations=3),
        )

        assert [call.html for call in refiner.calls] == [INITIAL_HTML, PAGE_1, PAGE_2]
        assert [call.overall_score for call in refiner.calls] == [2.0, 3.0, 2.5]
        assert result.html == PAGE_1

    async def test_equal_score_does_not_replace_best(self) -> None:
        observer = FakeRefinementObserver()
        evaluator = FakeEvaluator([make_evaluation(2.0), make_evaluation(2.0)])
        refiner = FakeRefiner([PAGE_1])
        orchestrator = _make_orchestrator(evaluator, refiner, observer)

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=4.0, max_iterations=1),
        )

        assert result.html == INITIAL_HTML
        assert result.improved is False
        assert observer.best_updates == []

    async def test_iterations_never_exceed_cap(self) -> None:
        evaluator = FakeEvaluator([make_evaluation(1.0)] + [make_evaluation(1.5)] * 3)
        refiner = FakeRefiner([PAGE_1, PAGE_2, PAGE_3])
        orchestrator = _make_orchestrator(evaluator, refiner)

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=5.0, max_iterations=3),
        )

        assert result.iterations == 3
        assert len(refiner.calls) == 3
        assert len(evaluator.evaluated_html) == 4

    async def test_refiner_receives_three_weakest_criteria_lowest_first(
        self,
    ) -> None:
        initial = make_evaluation(
            2.5,
            aesthetics=3.0,
            modernity=2.0,
            repository_fit=4.0,
            usability=1.5,
            consistency=2.0,
        )
        evaluator = FakeEvaluator([initial, make_evaluation(4.0)])
        refiner = FakeRefiner([PAGE_1])
        orchestrator = _make_orchestrator(evaluator, refiner)

        await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=3.5),
        )

        assert refiner.calls[0].focus == ["usability", "modernity", "consistency"]

    async def test_result_final_score_never_below_initial(self) -> None:
        evaluator = FakeEvaluator(
            [make_evaluation(3.0), make_evaluation(2.0), make_evaluation(1.0)]
        )
        refiner = FakeRefiner([PAGE_1, PAGE_2])
        orchestrator = _make_orchestrator(evaluator, refiner)

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=4.0, max_iterations=2),
        )

        assert result.html == INITIAL_HTML
        assert result.final_evaluation.overall_score == 3.0
        assert result.score_improvement == 0.0
        assert result.improved is False


class TestFailureRecovery:
    async def test_consecutive_refiner_failures_stop_the_loop(self) -> None:
        evaluator = FakeEvaluator([make_evaluation(2.0)])
        refiner = FakeRefiner(
            [RefinementFailure(reason="timeout"), RefinementFailure(reason="timeout")]
        )
        observer = FakeRefinementObserver()
        orchestrator = _make_orchestrator(evaluator, refiner, observer)

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=4.0, max_iterations=5),
        )

        assert result.html == INITIAL_HTML
        assert result.iterations == MAX_CONSECUTIVE_FAILURES
        assert result.improved is False
        assert len(refiner.calls) == 2
        assert observer.stopped_early == [2]
        assert [f.consecutive_failures for f in observer.failed] == [1, 2]

    async def test_both_passes_failing_returns_initial_page(self) -> None:
        evaluator = FakeEvaluator([make_evaluation(2.0)])
        refiner = FakeRefiner(
            [RefinementFailure(reason="boom"), RefinementFailure(reason="boom")]
        )
        orchestrator = _make_orchestrator(evaluator, refiner)

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=4.0, max_iterations=2),
        )

        assert result.html == INITIAL_HTML
        assert result.iterations == 2
        assert result.final_evaluation.overall_score == 2.0

    async def test_success_resets_failure_counter(self) -> None:
        evaluator = FakeEvaluator(
            [make_evaluation(2.0), make_evaluation(2.5), make_evaluation(3.0)]
        )
        refiner = FakeRefiner(
            [
                RefinementFailure(reason="first"),
                PAGE_1,
                RefinementFailure(reason="second"),
                PAGE_2,
            ]
        )
        observer = FakeRefinementObserver()
        orchestrator = _make_orchestrator(evaluator, refiner, observer)

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=5.0, max_iterations=4),
        )

        assert result.iterations == 4
        assert result.html == PAGE_2
        assert observer.stopped_early == []
        assert [f.consecutive_failures for f in observer.failed] == [1, 1]

    async def test_failed_pass_retries_from_unchanged_current_page(self) -> None:
        evaluator = FakeEvaluator([make_evaluation(2.0), make_evaluation(3.0)])
        refiner = FakeRefiner([RefinementFailure(reason="flaky"), PAGE_1])
        orchestrator = _make_orchestrator(evaluator, refiner)

        await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=5.0, max_iterations=2),
        )

        assert [call.html for call in refiner.calls] == [INITIAL_HTML, INITIAL_HTML]

    async def test_candidate_evaluation_failure_counts_as_failed_pass(self) -> None:
        evaluator = FakeEvaluator(
            [
                make_evaluation(2.0),
                ResponseValidationError(detail="overallScore: missing"),
                EvaluationFailure(reason="rate limited"),
            ]
        )
        refiner = FakeRefiner([PAGE_1, PAGE_2])
        observer = FakeRefinementObserver()
        orchestrator = _make_orchestrator(evaluator, refiner, observer)

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=4.0, max_iterations=3),
        )

        assert result.html == INITIAL_HTML
        assert result.iterations == 2
        assert observer.stopped_early == [2]
        assert "invalid judge response" in observer.failed[0].reason

    async def test_empty_candidate_counts_as_failed_pass(self) -> None:
        evaluator = FakeEvaluator([make_evaluation(2.0), make_evaluation(3.0)])
        refiner = FakeRefiner(["   \n", PAGE_1])
        observer = FakeRefinementObserver()
        orchestrator = _make_orchestrator(evaluator, refiner, observer)

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=5.0, max_iterations=2),
        )

        assert len(observer.failed) == 1
        assert "empty page" in observer.failed[0].reason
        # The empty candidate is never scored.
        assert evaluator.evaluated_html == [INITIAL_HTML, PAGE_1]
        assert result.html == PAGE_1

    async def test_invalid_html_response_counts_as_failed_pass(self) -> None:
        evaluator = FakeEvaluator([make_evaluation(2.0)])
        refiner = FakeRefiner(
            [
                InvalidHtmlResponseError(preview="Sure! Here is"),
                InvalidHtmlResponseError(preview="Sure! Here is"),
            ]
        )
        orchestrator = _make_orchestrator(evaluator, refiner)

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=4.0, max_iterations=3),
        )

        assert result.html == INITIAL_HTML

    async def test_unexpected_exception_propagates(self) -> None:
        evaluator = FakeEvaluator([make_evaluation(2.0)])
        refiner = FakeRefiner([RuntimeError("bug")])
        orchestrator = _make_orchestrator(evaluator, refiner)

        with pytest.raises(RuntimeError, match="bug"):
            await orchestrator.refine(
                html=INITIAL_HTML,
                context=make_context(),
                config=RefinementConfig(threshold=4.0),
            )


class TestInitialEvaluationFailure:
    async def test_initial_failure_raises_initial_evaluation_error(self) -> None:
        failure = EvaluationFailure(reason="network down")
        evaluator = FakeEvaluator([failure])
        refiner = FakeRefiner([])
        orchestrator = _make_orchestrator(evaluator, refiner)

        with pytest.raises(InitialEvaluationError) as exc_info:
            await orchestrator.refine(html=INITIAL_HTML, context=make_context())

        assert exc_info.value.__cause__ is failure
        assert str(exc_info.value).startswith("Failed to evaluate initial page:")
        assert refiner.calls == []

    async def test_initial_response_validation_error_is_wrapped(self) -> None:
        evaluator = FakeEvaluator([ResponseValidationError(detail="bad json")])
        orchestrator = _make_orchestrator(evaluator, FakeRefiner([]))

        with pytest.raises(InitialEvaluationError):
            await orchestrator.refine(html=INITIAL_HTML, context=make_context())


class TestConfigurationValidation:
    @pytest.mark.parametrize("threshold", [0.999, 5.001, 0.0, 6.0, float("nan")])
    async def test_invalid_threshold_raises_before_any_port_call(
        self, threshold: float
    ) -> None:
        evaluator = FakeEvaluator([])
        refiner = FakeRefiner([])
        orchestrator = _make_orchestrator(evaluator, refiner)

        with pytest.raises(InvalidThresholdError):
            await orchestrator.refine(
                html=INITIAL_HTML,
                context=make_context(),
                config=RefinementConfig(threshold=threshold),
            )

        assert evaluator.evaluated_html == []
        assert refiner.calls == []

    @pytest.mark.parametrize("max_iterations", [0, 11, -1])
    async def test_invalid_iteration_cap_raises_before_any_port_call(
        self, max_iterations: int
    ) -> None:
        evaluator = FakeEvaluator([])
        orchestrator = _make_orchestrator(evaluator, FakeRefiner([]))

        with pytest.raises(InvalidIterationCapError):
            await orchestrator.refine(
                html=INITIAL_HTML,
                context=make_context(),
                config=RefinementConfig(max_iterations=max_iterations),
            )

        assert evaluator.evaluated_html == []

    async def test_configuration_errors_share_a_base_class(self) -> None:
        orchestrator = _make_orchestrator(FakeEvaluator([]), FakeRefiner([]))

        with pytest.raises(ConfigurationError):
            await orchestrator.refine(
                html=INITIAL_HTML,
                context=make_context(),
                config=RefinementConfig(threshold=10.0),
            )


class TestObserverEvents:
    async def test_event_sequence_for_one_successful_pass(self) -> None:
        observer = FakeRefinementObserver()
        orchestrator = _make_orchestrator(
            FakeEvaluator([make_evaluation(2.5), make_evaluation(4.0)]),
            FakeRefiner([PAGE_1]),
            observer,
        )

        await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=3.5),
        )

        assert observer.events == [
            "started",
            "initial_evaluated",
            "iteration_started",
            "iteration_scored",
            "best_updated",
            "threshold_met",
            "completed",
        ]
        assert observer.scored[0].previous_score == 2.5
        assert observer.completed[0].iterations == 1
        assert observer.completed[0].improved is True

    async def test_focus_event_carries_criterion_labels(self) -> None:
        observer = FakeRefinementObserver()
        initial = make_evaluation(2.0, repository_fit=1.0)
        orchestrator = _make_orchestrator(
            FakeEvaluator([initial, make_evaluation(4.0)]),
            FakeRefiner([PAGE_1]),
            observer,
        )

        await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=3.5),
        )

        assert observer.focus[0][0] == "Repository Fit"

    async def test_verbose_false_emits_no_events(self) -> None:
        observer = FakeRefinementObserver()
        orchestrator = _make_orchestrator(
            FakeEvaluator([make_evaluation(2.0), make_evaluation(4.0)]),
            FakeRefiner([PAGE_1]),
            observer,
        )

        result = await orchestrator.refine(
            html=INITIAL_HTML,
            context=make_context(),
            config=RefinementConfig(threshold=3.5, verbose=False),
        )

        assert observer.events == []
        assert result.html == PAGE_1
