"""CLI entrypoint for pagecraft — typer app with `refine`, `evaluate` and `compare` commands."""

import asyncio
import sys
from collections.abc import Callable
from pathlib import Path

import structlog
import typer

from pagecraft.config.domain.config import SiteConfig
from pagecraft.config.infrastructure.observer import StructlogConfigObserver
from pagecraft.config.infrastructure.yaml_loader import YamlConfigLoader
from pagecraft.core.errors import PagecraftError
from pagecraft.evaluation.domain.evaluation import DesignEvaluation
from pagecraft.evaluation.domain.report import (
    EvaluationComparison,
    compare_evaluations,
    generate_evaluation_report,
)
from pagecraft.evaluation.infrastructure.litellm import LiteLLMEvaluator
from pagecraft.evaluation.infrastructure.observer import StructlogEvaluatorObserver
from pagecraft.refinement.application.orchestrator import RefinementOrchestrator
from pagecraft.refinement.domain.config import should_use_self_refine
from pagecraft.refinement.domain.observer import RefinementObserver
from pagecraft.refinement.domain.result import RefinementResult
from pagecraft.refinement.infrastructure.composite_observer import (
    CompositeRefinementObserver,
)
from pagecraft.refinement.infrastructure.litellm import LiteLLMRefiner
from pagecraft.refinement.infrastructure.observer import (
    StructlogRefinementObserver,
    StructlogRefinerObserver,
)
from pagecraft.refinement.infrastructure.progress_observer import (
    ProgressRefinementObserver,
)

app = typer.Typer(add_completion=False)


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _load_config(config_path: Path) -> SiteConfig:
    loader = YamlConfigLoader(observer=StructlogConfigObserver())
    return loader.load(path=config_path)


def _read_html(html_path: Path) -> str:
    if not html_path.is_file():
        typer.echo(f"Failed to read page: file not found: {html_path}")
        raise typer.Exit(code=1)
    return html_path.read_text(encoding="utf-8")


def _make_evaluator(config: SiteConfig) -> LiteLLMEvaluator:
    return LiteLLMEvaluator(config=config.judge, observer=StructlogEvaluatorObserver())


# ---------------------------------------------------------------------------
# ANSI helpers
# ---------------------------------------------------------------------------
_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_CYAN = "\033[36m"
_YELLOW = "\033[33m"
_GREEN = "\033[32m"
_RED = "\033[31m"
_WHITE = "\033[97m"


def _score_color(score: float) -> str:
    if score >= 4.0:
        return _GREEN
    if score >= 3.0:
        return _YELLOW
    return _RED


def _rule(width: int = 72, color: str = _DIM) -> None:
    typer.echo(f"{color}{'─' * width}{_RESET}")


def _print_summary(result: RefinementResult, output_path: Path) -> None:
    """Print a colorized summary of a refinement run to stdout."""
    initial = result.initial_evaluation.overall_score
    final = result.final_evaluation.overall_score
    sign = "+" if result.score_improvement > 0 else ""

    typer.echo("")
    _rule(color=_CYAN)
    typer.echo(f"{_CYAN}{_BOLD}  pagecraft  ·  Refinement Complete{_RESET}")
    _rule(color=_CYAN)
    typer.echo("")

    rows: list[tuple[str, str]] = [
        ("Initial score", f"{_score_color(initial)}{initial:.1f}/5{_RESET}"),
        ("Final score", f"{_score_color(final)}{final:.1f}/5{_RESET}"),
        ("Improvement", f"{sign}{result.score_improvement:.1f}"),
        ("Improved", "yes" if result.improved else "no"),
        ("Iterations", str(result.iterations)),
        ("Output", str(output_path)),
    ]
    label_w = max(len(label) for label, _ in rows)
    for label, value in rows:
        typer.echo(f"  {_DIM}{label:<{label_w}}{_RESET}  {_WHITE}{value}{_RESET}")

    typer.echo("")
    _rule(color=_CYAN)


def _print_comparison(comparison: EvaluationComparison) -> None:
    winner_label = {"A": "Page A", "B": "Page B", "tie": "Tie"}[comparison.winner]
    typer.echo(
        f"{_BOLD}Winner: {winner_label}{_RESET}"
        f"  {_DIM}(overall difference {comparison.score_difference:.1f}){_RESET}"
    )
    label_w = max(len(key) for key in comparison.criteria)
    for key, criterion in comparison.criteria.items():
        typer.echo(
            f"  {key:<{label_w}}  A {criterion.a:.1f}  B {criterion.b:.1f}"
            f"  {_DIM}{criterion.winner}{_RESET}"
        )


def _run_guarded(body: Callable[[], None]) -> None:
    """Run a command body, mapping errors to a message and exit code 1."""
    try:
        body()
    except typer.Exit:
        raise
    except KeyboardInterrupt:
        typer.echo("Refinement interrupted.")
        sys.exit(1)
    except PagecraftError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)


@app.command()
def refine(
    config_path: Path = typer.Argument(..., help="Path to site config YAML"),
    html_path: Path = typer.Argument(..., help="Path to the generated HTML page"),
    output_path: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Where to write the refined page (defaults to overwriting the input)",
    ),
    report_path: Path | None = typer.Option(
        None,
        "--report",
        help="Optional path for a Markdown evaluation report of the final page",
    ),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Refine a generated page until it meets the configured quality threshold."""

    def body() -> None:
        _configure_structlog(log_format=log_format)
        config = _load_config(config_path=config_path)
        html = _read_html(html_path=html_path)
        destination = output_path if output_path is not None else html_path
        destination.parent.mkdir(parents=True, exist_ok=True)

        if not should_use_self_refine(config.ai.quality):
            typer.echo(
                f"Quality mode is '{config.ai.quality}'; self-refine is skipped."
            )
            destination.write_text(html, encoding="utf-8")
            return

        observers: list[RefinementObserver] = [StructlogRefinementObserver()]
        if log_format != "json":
            observers.append(ProgressRefinementObserver())
        orchestrator = RefinementOrchestrator(
            evaluator=_make_evaluator(config=config),
            refiner=LiteLLMRefiner(
                config=config.refiner, observer=StructlogRefinerObserver()
            ),
            observer=CompositeRefinementObserver(observers=observers),
        )

        result = asyncio.run(
            orchestrator.refine(
                html=html, context=config.context, config=config.refinement
            )
        )

        destination.write_text(result.html, encoding="utf-8")
        if report_path is not None:
            report_path.write_text(
                generate_evaluation_report(result.final_evaluation) + "\n",
                encoding="utf-8",
            )
        _print_summary(result=result, output_path=destination)

    _run_guarded(body)


@app.command()
def evaluate(
    config_path: Path = typer.Argument(..., help="Path to site config YAML"),
    html_path: Path = typer.Argument(..., help="Path to the generated HTML page"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Score a page with the design judge and print a Markdown report."""

    def body() -> None:
        _configure_structlog(log_format=log_format)
        config = _load_config(config_path=config_path)
        html = _read_html(html_path=html_path)
        evaluator = _make_evaluator(config=config)
        evaluation: DesignEvaluation = asyncio.run(
            evaluator.evaluate(html=html, context=config.context)
        )
        typer.echo(generate_evaluation_report(evaluation))

    _run_guarded(body)


@app.command()
def compare(
    config_path: Path = typer.Argument(..., help="Path to site config YAML"),
    html_a: Path = typer.Argument(..., help="Path to page A"),
    html_b: Path = typer.Argument(..., help="Path to page B"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Evaluate two pages and print which one the judge prefers."""

    def body() -> None:
        _configure_structlog(log_format=log_format)
        config = _load_config(config_path=config_path)
        page_a = _read_html(html_path=html_a)
        page_b = _read_html(html_path=html_b)
        evaluator = _make_evaluator(config=config)

        async def _evaluate_both() -> tuple[DesignEvaluation, DesignEvaluation]:
            evaluation_a = await evaluator.evaluate(html=page_a, context=config.context)
            evaluation_b = await evaluator.evaluate(html=page_b, context=config.context)
            return evaluation_a, evaluation_b

        evaluation_a, evaluation_b = asyncio.run(_evaluate_both())
        _print_comparison(compare_evaluations(evaluation_a, evaluation_b))

    _run_guarded(body)


if __name__ == "__main__":
    app()
