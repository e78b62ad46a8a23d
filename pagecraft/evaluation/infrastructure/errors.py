"""Error types raised by evaluation infrastructure."""

from pagecraft.core.errors import PortError


class EvaluationFailure(PortError):
    """Raised when the judge cannot be invoked or its reply cannot be used."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to evaluate page design: {reason}")


class ResponseValidationError(EvaluationFailure):
    """Raised when the judge reply violates the DesignEvaluation invariants."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(reason=f"invalid judge response: {detail}")
