"""Abstract market-data client interface.

Defines the contract for all upstream implementations.
Aggregation code depends only on this interface, keeping
Token Metrics transport and payment details in the concrete client.
"""

from abc import ABC, abstractmethod

from radar.config import PaymentToken
from radar.upstream.types import UpstreamResponse


class DataClient(ABC):
    """Abstract base class for market-data API clients."""

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        ...

    @abstractmethod
    async def fetch_trading_signals(
        self,
        signal: int | None = None,
        limit: int = 50,
        marketcap: float | None = None,
        volume: float | None = None,
        payment_token: PaymentToken | None = None,
    ) -> UpstreamResponse:
        """Fetch trading signals filtered by direction and optional floors (paid)."""
        ...

    @abstractmethod
    async def fetch_trader_grades(
        self,
        token_ids: list,
        limit: int = 50,
        payment_token: PaymentToken | None = None,
    ) -> UpstreamResponse:
        """Fetch trader grades for a batch of token ids (paid)."""
        ...

    @abstractmethod
    async def fetch_ai_reports(
        self,
        token_ids: list,
        limit: int = 50,
        payment_token: PaymentToken | None = None,
    ) -> UpstreamResponse:
        """Fetch AI analysis reports for a batch of token ids (paid)."""
        ...

    @abstractmethod
    async def fetch_tokens(
        self,
        token_ids: list,
        limit: int = 50,
    ) -> UpstreamResponse:
        """Fetch token metadata (category, market cap, volume) for a batch (free)."""
        ...
