"""RefinementConfig — settings for one self-refine invocation."""

from pydantic import BaseModel

from pagecraft.config.domain.ai import QualityMode
from pagecraft.refinement.domain.errors import (
    InvalidIterationCapError,
    InvalidThresholdError,
)

MIN_THRESHOLD = 1.0
MAX_THRESHOLD = 5.0
MIN_ITERATIONS = 1
MAX_ITERATIONS = 10


class RefinementConfig(BaseModel, frozen=True):
    """Immutable loop settings.

    Ranges are checked by validate_refinement_config rather than by field
    constraints so that violations surface as ConfigurationError subtypes.
    ``verbose`` only controls whether loop events reach the observer.
    """

    threshold: float = 3.5
    max_iterations: int = 2
    verbose: bool = True


DEFAULT_REFINEMENT_CONFIG = RefinementConfig()


def validate_refinement_config(config: RefinementConfig) -> RefinementConfig:
    """Return *config* unchanged if usable.

    Raises:
        InvalidThresholdError: if threshold is outside [1, 5] (or NaN).
        InvalidIterationCapError: if max_iterations is outside [1, 10].
    """
    if not MIN_THRESHOLD <= config.threshold <= MAX_THRESHOLD:
        raise InvalidThresholdError(
            threshold=config.threshold, minimum=MIN_THRESHOLD, maximum=MAX_THRESHOLD
        )
    if not MIN_ITERATIONS <= config.max_iterations <= MAX_ITERATIONS:
        raise InvalidIterationCapError(
            max_iterations=config.max_iterations,
            minimum=MIN_ITERATIONS,
            maximum=MAX_ITERATIONS,
        )
    return config


def should_use_self_refine(quality: QualityMode) -> bool:
    """Self-refine runs only in the "high" quality mode."""
    return quality == "high"
