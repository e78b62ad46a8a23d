"""Parse-and-validate step for raw judge replies."""

from pydantic import ValidationError

from pagecraft.core.response_cleaner import clean_json_response
from pagecraft.evaluation.domain.evaluation import DesignEvaluation
from pagecraft.evaluation.infrastructure.errors import ResponseValidationError


def _describe(exc: ValidationError) -> str:
    """Summarise pydantic errors as 'criteria.aesthetics.score: <msg>; ...'."""
    parts: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "response"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def parse_evaluation_response(text: str) -> DesignEvaluation:
    """Turn a judge reply, optionally wrapped in code fences, into a DesignEvaluation.

    Raises:
        ResponseValidationError: if the reply is not JSON or any field violates
            the evaluation invariants (missing criterion, score outside [1, 5],
            empty reasoning, suggestions not a list of strings).
    """
    cleaned = clean_json_response(text)
    try:
        return DesignEvaluation.model_validate_json(cleaned)
    except ValidationError as exc:
        raise ResponseValidationError(detail=_describe(exc)) from exc
