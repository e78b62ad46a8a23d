"""Error types raised by the refinement loop itself."""

from pagecraft.core.errors import PagecraftError


class ConfigurationError(PagecraftError):
    """Raised when refinement settings are out of range. Never retried."""


class InvalidThresholdError(ConfigurationError):
    def __init__(self, threshold: float, minimum: float, maximum: float) -> None:
        self.threshold = threshold
        super().__init__(
            f"Failed to validate refinement config: invalid threshold {threshold}. "
            f"Must be between {minimum:g} and {maximum:g}."
        )


class InvalidIterationCapError(ConfigurationError):
    def __init__(self, max_iterations: int, minimum: int, maximum: int) -> None:
        self.max_iterations = max_iterations
        super().__init__(
            f"Failed to validate refinement config: invalid max_iterations "
            f"{max_iterations}. Must be between {minimum} and {maximum}."
        )


class InitialEvaluationError(PagecraftError):
    """Raised when the starting page cannot be evaluated.

    The loop never guesses a substitute score; the underlying EvaluationFailure
    is chained as ``__cause__``.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to evaluate initial page: {reason}")
