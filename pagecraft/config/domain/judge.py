"""Judge configuration model."""

from pydantic import BaseModel, Field

# Evaluation is fully deterministic by default.
EVALUATION_TEMPERATURE = 0.0


class JudgeConfig(BaseModel, frozen=True):
    model: str = Field(min_length=1)
    temperature: float = Field(default=EVALUATION_TEMPERATURE, ge=0.0)
    api_key: str | None = None
