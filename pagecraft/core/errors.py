"""Base exception classes for all pagecraft-specific errors."""


class PagecraftError(Exception):
    """Base class for all pagecraft errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class PortError(PagecraftError):
    """Base class for failures raised by the evaluation and refinement ports.

    The refinement loop absorbs these mid-iteration, up to its
    consecutive-failure cap.
    """
