"""Helpers that strip Markdown fences and chatter from raw LLM replies."""

from typing import Any

from pagecraft.refinement.infrastructure.errors import InvalidHtmlResponseError

_DOCTYPE = "<!doctype"


def _strip_fences(text: str, language: str) -> str:
    cleaned = text.strip()
    opening = f"```{language}"
    if cleaned.startswith(opening):
        cleaned = cleaned[len(opening) :]
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def reply_text(response: Any) -> str:
    """Return the first choice's message content of a completion response.

    Raises:
        ValueError: if the response carries no choices (e.g. content filtered).
    """
    choices = getattr(response, "choices", None)
    if not choices:
        raise ValueError("provider reply contained no choices")
    return choices[0].message.content or ""


def clean_json_response(text: str) -> str:
    """Remove ```json fences from a reply. The result is not parsed."""
    return _strip_fences(text, language="json")


def clean_html_response(text: str) -> str:
    """Return the HTML document contained in *text*, starting at ``<!DOCTYPE``.

    Fences are removed first; any prose before the doctype is dropped.

    Raises:
        InvalidHtmlResponseError: if no doctype declaration is present.
    """
    cleaned = _strip_fences(text, language="html")

    doctype_index = cleaned.lower().find(_DOCTYPE)
    if doctype_index > 0:
        cleaned = cleaned[doctype_index:]

    result = cleaned.strip()
    if not result.lower().startswith(_DOCTYPE):
        raise InvalidHtmlResponseError(preview=result[:50])
    return result


def try_clean_html_response(text: str) -> str | None:
    """Like clean_html_response, but returns None instead of raising."""
    try:
        return clean_html_response(text)
    except InvalidHtmlResponseError:
        return None
