"""ProgressRefinementObserver — renders loop progress to stderr with Rich."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text


def _score_style(score: float, threshold: float) -> str:
    if score >= threshold:
        return "bright_green"
    if score >= threshold - 1.0:
        return "yellow"
    return "red"


class ProgressRefinementObserver:
    """Prints one line per loop phase: initial score, each pass, and the outcome.

    Pass ``disabled=True`` to suppress all terminal output (useful in tests).

    Does NOT inherit from RefinementObserver (structural typing via Protocol).
    """

    def __init__(self, console: Console | None = None, disabled: bool = False) -> None:
        self._console = console if console is not None else Console(stderr=True)
        self._disabled = disabled
        self._threshold = 0.0

    def _print(self, text: Text) -> None:
        if not self._disabled:
            self._console.print(text)

    def _score(self, score: float) -> tuple[str, str]:
        return (f"{score:.1f}/5", _score_style(score=score, threshold=self._threshold))

    def refinement_started(self, threshold: float, max_iterations: int) -> None:
        self._threshold = threshold
        self._print(
            Text.assemble(
                ("self-refine ", "bold"),
                (f"threshold {threshold:.1f}, up to {max_iterations} passes", "dim"),
            )
        )

    def refinement_initial_evaluated(
        self, overall_score: float, threshold: float
    ) -> None:
        self._print(Text.assemble("  initial  ", self._score(overall_score)))

    def refinement_threshold_met(self, iteration: int, overall_score: float) -> None:
        label = "initial page" if iteration == 0 else f"pass {iteration}"
        self._print(Text(f"  ✓ {label} meets the threshold", style="bright_green"))

    def refinement_iteration_started(
        self, iteration: int, max_iterations: int, focus: list[str]
    ) -> None:
        self._print(
            Text.assemble(
                f"  pass {iteration}/{max_iterations}  ",
                ("focus: " + ", ".join(focus), "dim"),
            )
        )

    def refinement_iteration_scored(
        self, iteration: int, overall_score: float, previous_score: float
    ) -> None:
        self._print(
            Text.assemble(
                "    scored ",
                self._score(overall_score),
                (f"  (was {previous_score:.1f}/5)", "dim"),
            )
        )

    def refinement_best_updated(self, iteration: int, overall_score: float) -> None:
        self._print(Text("    ▲ new best version", style="bold bright_green"))

    def refinement_iteration_failed(
        self, iteration: int, reason: str, consecutive_failures: int
    ) -> None:
        self._print(Text(f"    ✗ pass {iteration} failed: {reason}", style="red"))

    def refinement_stopped_early(
        self, iteration: int, consecutive_failures: int
    ) -> None:
        self._print(
            Text(
                f"  {consecutive_failures} consecutive failures, stopping refinement",
                style="bold red",
            )
        )

    def refinement_completed(
        self,
        iterations: int,
        final_score: float,
        score_improvement: float,
        improved: bool,
    ) -> None:
        sign = "+" if score_improvement > 0 else ""
        self._print(
            Text.assemble(
                "  final    ",
                self._score(final_score),
                (f"  {sign}{score_improvement:.1f} after {iterations} passes", "dim"),
            )
        )
