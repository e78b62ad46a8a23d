"""Refiner configuration model."""

from pydantic import BaseModel, Field

# Page content is generated with more creative sampling than evaluation.
CONTENT_TEMPERATURE = 0.7
DEFAULT_MAX_OUTPUT_TOKENS = 4000


class RefinerConfig(BaseModel, frozen=True):
    model: str = Field(min_length=1)
    temperature: float = Field(default=CONTENT_TEMPERATURE, ge=0.0)
    max_output_tokens: int = Field(default=DEFAULT_MAX_OUTPUT_TOKENS, ge=1)
    api_key: str | None = None
