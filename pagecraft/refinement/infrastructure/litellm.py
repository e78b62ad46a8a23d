"""LiteLLMRefiner — page refiner implementation using LiteLLM."""

import time

import litellm

from pagecraft.config.domain.refiner import RefinerConfig
from pagecraft.core.response_cleaner import clean_html_response, reply_text
from pagecraft.evaluation.domain.context import RefinementContext
from pagecraft.evaluation.domain.evaluation import DesignEvaluation
from pagecraft.evaluation.domain.ranking import RankedCriterion
from pagecraft.refinement.domain.observer import RefinerObserver
from pagecraft.refinement.infrastructure.errors import (
    InvalidHtmlResponseError,
    RefinementFailure,
)

_REQUIREMENTS = """\
REQUIREMENTS:
1. Keep using Tailwind CSS classes (loaded via CDN)
2. Maintain the same general structure but improve the weak areas
3. Make it responsive (mobile-first)
4. Use modern design patterns
5. No external images - use gradients or emoji as placeholders

OUTPUT: Return ONLY the complete HTML document, no explanation. \
Start with <!DOCTYPE html>."""


def _format_score(score: float) -> str:
    return f"{score:g}"


def build_refinement_prompt(
    html: str,
    evaluation: DesignEvaluation,
    focus: list[RankedCriterion],
    context: RefinementContext,
) -> str:
    """Build the prompt asking for an improved version of *html*."""
    analysis = context.analysis
    colors = context.design.colors
    issues = "\n".join(
        f"- **{c.label}** ({_format_score(c.score)}/5): {c.reasoning}" for c in focus
    )
    suggestions = "\n".join(f"- {s}" for s in evaluation.suggestions)
    focus_names = ", ".join(c.label for c in focus)

    return (
        "You are an expert web designer. Improve the following HTML page based "
        "on feedback.\n\n"
        "## Project Information\n"
        f"- Name: {analysis.name}\n"
        f"- Description: {analysis.description}\n"
        f"- Type: {analysis.project_type}\n"
        f"- Audience: {analysis.audience}\n"
        f"- Style: {analysis.style}\n\n"
        "## Design System\n"
        f"- Primary Color: {colors.primary}\n"
        f"- Secondary Color: {colors.secondary}\n"
        f"- Accent Color: {colors.accent}\n"
        f"- Background: {colors.background}\n"
        f"- Text: {colors.text}\n"
        f"- Fonts: {context.design.typography.heading_font} / "
        f"{context.design.typography.body_font}\n"
        f"- Layout: {context.design.layout}\n\n"
        f"## Current Evaluation (Score: {_format_score(evaluation.overall_score)}/5)\n"
        f"{evaluation.reasoning}\n\n"
        "## Specific Issues to Address\n"
        f"{issues}\n\n"
        "## Improvement Suggestions\n"
        f"{suggestions}\n\n"
        "## Current HTML\n"
        f"```html\n{html}\n```\n\n"
        "## Your Task\n"
        "Generate an improved version of this HTML that addresses the feedback "
        "above.\n"
        f"Focus especially on: {focus_names}.\n\n"
        f"{_REQUIREMENTS}"
    )


class LiteLLMRefiner:
    """Refiner implementation that asks an LLM via LiteLLM for a better page."""

    def __init__(self, config: RefinerConfig, observer: RefinerObserver) -> None:
        self._config = config
        self._observer = observer

    async def refine(
        self,
        html: str,
        evaluation: DesignEvaluation,
        focus: list[RankedCriterion],
        context: RefinementContext,
    ) -> str:
        """Generate an improved page and return its cleaned HTML.

        Raises:
            RefinementFailure: if the LLM call fails.
            InvalidHtmlResponseError: if the reply contains no HTML document.
        """
        self._observer.refiner_generation_started(
            model=self._config.model, focus=[c.label for c in focus]
        )

        prompt = build_refinement_prompt(
            html=html, evaluation=evaluation, focus=focus, context=context
        )

        start = time.monotonic()
        try:
            response = await litellm.acompletion(
                model=self._config.model,
                temperature=self._config.temperature,
                max_tokens=self._config.max_output_tokens,
                api_key=self._config.api_key,
                messages=[{"role": "user", "content": prompt}],
            )
            raw_content = reply_text(response)
        except Exception as exc:
            reason = str(exc)
            self._observer.refiner_generation_failed(
                model=self._config.model, reason=reason
            )
            raise RefinementFailure(reason=reason) from exc

        duration_ms = int((time.monotonic() - start) * 1000)

        try:
            refined = clean_html_response(raw_content)
        except InvalidHtmlResponseError as exc:
            self._observer.refiner_generation_failed(
                model=self._config.model, reason=str(exc)
            )
            raise

        self._observer.refiner_generation_completed(
            model=self._config.model,
            html_length=len(refined),
            duration_ms=duration_ms,
        )
        return refined
