"""Failure kinds raised below the refresh controller. None of them escape it."""


class IngestionError(Exception):
    """Base class for ingestion failures."""


class RateLimited(IngestionError):
    """Upstream answered 429. `reset_at` is epoch seconds before which no call should be made."""

    def __init__(self, reset_at: float):
        super().__init__(f"rate limited until {reset_at:.0f}")
        self.reset_at = reset_at


class UpstreamError(IngestionError):
    """Non-2xx, malformed, or empty upstream response, or a transport failure."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class StoreUnavailable(IngestionError):
    """The article table could not be read or written."""
