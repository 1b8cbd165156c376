"""Custom exceptions for the signal radar service.

Upstream, aggregation and route layers all import from here
to avoid circular imports between modules.
"""


class RadarError(Exception):
    """Base exception for all radar errors."""


class UpstreamError(RadarError):
    """Raised when the market-data API call fails and the caller cannot degrade.

    ``status_code`` carries the HTTP status when one was received, so callers
    can branch on it instead of parsing the message.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AggregationError(RadarError):
    """Raised when joining or deriving radar records fails unexpectedly."""
