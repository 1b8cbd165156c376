"""Upstream response envelope shared by all data client implementations."""

from dataclasses import dataclass, field


@dataclass
class UpstreamResponse:
    """Result of one market-data API call.

    Clients never raise for transport or HTTP failures; they return
    ``success=False`` with ``error`` set and, when the server answered,
    the HTTP ``status_code``.
    """

    success: bool
    data: list[dict] = field(default_factory=list)
    error: str | None = None
    status_code: int | None = None

    @classmethod
    def ok(cls, data: list[dict]) -> "UpstreamResponse":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, status_code: int | None = None) -> "UpstreamResponse":
        return cls(success=False, error=error, status_code=status_code)

    @property
    def not_found(self) -> bool:
        """True when the API rejected the request with 404 (unsupported filter)."""
        return self.status_code == 404


def join_token_ids(token_ids: list) -> str:
    """Build the comma-separated batch key, dropping duplicates in first-seen order."""
    seen: dict[str, None] = {}
    for token_id in token_ids:
        seen.setdefault(str(token_id), None)
    return ",".join(seen)
