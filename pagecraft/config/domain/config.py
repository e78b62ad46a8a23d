"""Top-level SiteConfig aggregate — the root configuration object."""

from pydantic import BaseModel, Field

from pagecraft.config.domain.ai import AiConfig
from pagecraft.config.domain.judge import JudgeConfig
from pagecraft.config.domain.refiner import RefinerConfig
from pagecraft.evaluation.domain.context import RefinementContext
from pagecraft.refinement.domain.config import DEFAULT_REFINEMENT_CONFIG, RefinementConfig


class SiteConfig(BaseModel, frozen=True):
    """Root configuration aggregate for refining one generated site."""

    name: str = Field(min_length=1)
    ai: AiConfig = Field(default_factory=AiConfig)
    judge: JudgeConfig
    refiner: RefinerConfig
    refinement: RefinementConfig = DEFAULT_REFINEMENT_CONFIG
    context: RefinementContext
