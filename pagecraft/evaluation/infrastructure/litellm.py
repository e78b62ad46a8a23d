"""LiteLLMEvaluator — design judge implementation using LiteLLM."""

import time

import litellm

from pagecraft.config.domain.judge import JudgeConfig
from pagecraft.core.response_cleaner import reply_text
from pagecraft.evaluation.domain.context import RefinementContext
from pagecraft.evaluation.domain.evaluation import CRITERIA, DesignEvaluation
from pagecraft.evaluation.domain.observer import EvaluatorObserver
from pagecraft.evaluation.infrastructure.errors import (
    EvaluationFailure,
    ResponseValidationError,
)
from pagecraft.evaluation.infrastructure.parser import parse_evaluation_response

_RESPONSE_FORMAT = """\
Respond with a JSON object in this exact format:
{
  "overallScore": <number 1-5>,
  "criteria": {
    "aesthetics": { "score": <number 1-5>, "reasoning": "<brief explanation>" },
    "modernity": { "score": <number 1-5>, "reasoning": "<brief explanation>" },
    "repositoryFit": { "score": <number 1-5>, "reasoning": "<brief explanation>" },
    "usability": { "score": <number 1-5>, "reasoning": "<brief explanation>" },
    "consistency": { "score": <number 1-5>, "reasoning": "<brief explanation>" }
  },
  "reasoning": "<overall assessment in 2-3 sentences>",
  "suggestions": ["<improvement 1>", "<improvement 2>", "<improvement 3>"]
}

Be objective and critical. A score of 3 means "acceptable", 4 means "good", \
5 means "excellent". Most generated sites should score between 2-4. Reserve 5 \
for truly exceptional designs."""


def build_evaluation_prompt(html: str, context: RefinementContext) -> str:
    """Build the judge prompt for one page."""
    repository = context.repository
    criteria = "\n\n".join(
        f"### {label}\n{description}" for _, label, description in CRITERIA
    )
    return (
        "You are an expert web designer evaluating the quality of a generated "
        "website.\n\n"
        "## Repository Information\n"
        f"- Name: {repository.name}\n"
        f"- Description: {repository.description}\n"
        f"- Primary Language: {repository.language}\n"
        f"- Topics: {', '.join(repository.topics)}\n\n"
        "## Generated HTML\n"
        f"```html\n{html}\n```\n\n"
        "## Evaluation Task\n"
        "Evaluate this generated website design on the following criteria, "
        "scoring each from 1-5:\n\n"
        f"{criteria}\n\n"
        "## Response Format\n"
        f"{_RESPONSE_FORMAT}"
    )


class LiteLLMEvaluator:
    """Evaluator implementation that delegates scoring to an LLM via LiteLLM.

    The reply may be wrapped in code fences; it is cleaned and validated into a
    DesignEvaluation before it leaves this class.
    """

    def __init__(self, config: JudgeConfig, observer: EvaluatorObserver) -> None:
        self._config = config
        self._observer = observer

    async def evaluate(
        self, html: str, context: RefinementContext
    ) -> DesignEvaluation:
        """Invoke the LLM judge and return a structured DesignEvaluation.

        Raises:
            EvaluationFailure: if the LLM call fails.
            ResponseValidationError: if the reply cannot be parsed into a
                DesignEvaluation.
        """
        self._observer.evaluator_scoring_started(
            model=self._config.model, html_length=len(html)
        )

        start = time.monotonic()
        try:
            response = await litellm.acompletion(
                model=self._config.model,
                temperature=self._config.temperature,
                api_key=self._config.api_key,
                messages=[
                    {
                        "role": "user",
                        "content": build_evaluation_prompt(html=html, context=context),
                    },
                ],
            )
            raw_content = reply_text(response)
        except Exception as exc:
            reason = str(exc)
            self._observer.evaluator_scoring_failed(
                model=self._config.model, reason=reason
            )
            raise EvaluationFailure(reason=reason) from exc

        duration_ms = int((time.monotonic() - start) * 1000)

        try:
            evaluation = parse_evaluation_response(raw_content)
        except ResponseValidationError as exc:
            self._observer.evaluator_scoring_failed(
                model=self._config.model, reason=str(exc)
            )
            raise

        self._observer.evaluator_scoring_completed(
            model=self._config.model,
            overall_score=evaluation.overall_score,
            duration_ms=duration_ms,
        )
        return evaluation
