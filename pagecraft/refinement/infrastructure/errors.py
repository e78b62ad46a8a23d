"""Error types raised by refinement infrastructure."""

from pagecraft.core.errors import PortError


class RefinementFailure(PortError):
    """Raised when the refiner cannot produce a usable page."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to generate refined page: {reason}")


class InvalidHtmlResponseError(RefinementFailure):
    """Raised when a generated reply does not contain an HTML document."""

    def __init__(self, preview: str) -> None:
        self.preview = preview
        super().__init__(
            reason=(
                "invalid HTML response: missing DOCTYPE declaration. "
                f'Response starts with: "{preview}..."'
            )
        )
