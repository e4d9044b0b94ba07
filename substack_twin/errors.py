"""Error types raised by the extraction core and its adapters."""


class SubstackTwinError(RuntimeError):
    """Base class for errors surfaced to callers."""


class InvalidFeedFormat(SubstackTwinError):
    """Raised when a fetched feed body is not an RSS/Atom document."""

    def __init__(self, reason: str, message: str = ""):
        self.reason = reason
        super().__init__(message or f"RSS_INVALID_{reason.upper()}")


class InvalidInputUrl(SubstackTwinError):
    """Raised when the caller supplies an empty or unparseable URL."""


class FetchError(SubstackTwinError):
    """Raised when a page or feed cannot be retrieved."""
