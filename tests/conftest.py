"""Shared test fixtures for the signal radar."""

from unittest.mock import AsyncMock

import pytest

from radar.config import AppSettings, CacheSettings, UpstreamSettings
from radar.upstream.client import DataClient
from radar.upstream.types import UpstreamResponse

# ---------------------------------------------------------------------------
# Sample upstream payloads (mimic Token Metrics v2 records)
# ---------------------------------------------------------------------------

SIGNALS = [
    {
        "TOKEN_ID": 3375,
        "TOKEN_NAME": "Bitcoin",
        "TOKEN_SYMBOL": "BTC",
        "DATE": "2025-06-01",
        "TRADING_SIGNAL": 1,
        "TRADING_SIGNALS_RETURNS": 120.5,
        "HOLDING_RETURNS": 80.0,
        "TM_LINK": "https://app.tokenmetrics.com/bitcoin",
        "TM_TRADER_GRADE": None,
    },
    {
        "TOKEN_ID": 3306,
        "TOKEN_NAME": "Ethereum",
        "TOKEN_SYMBOL": "ETH",
        "DATE": "2025-06-01",
        "TRADING_SIGNAL": 1,
        "TRADING_SIGNALS_RETURNS": -10.0,
        "HOLDING_RETURNS": 5.0,
        "TM_LINK": "https://app.tokenmetrics.com/ethereum",
        "TM_TRADER_GRADE": 91.0,
    },
    {
        "TOKEN_ID": 3988,
        "TOKEN_NAME": "Solana",
        "TOKEN_SYMBOL": "SOL",
        "DATE": "2025-06-01",
        "TRADING_SIGNAL": 1,
        "TRADING_SIGNALS_RETURNS": 40.0,
        "HOLDING_RETURNS": 40.0,
        "TM_LINK": "https://app.tokenmetrics.com/solana",
    },
]

GRADES = [
    {"TOKEN_ID": 3375, "TM_TRADER_GRADE": 82.0, "TM_TRADER_GRADE_24H_PCT_CHANGE": 3.5},
    {"TOKEN_ID": 3306, "TM_TRADER_GRADE": 60.0, "TM_TRADER_GRADE_24H_PCT_CHANGE": -1.2},
]

REPORTS = [
    {
        "TOKEN_ID": 3375,
        "TOKEN_SYMBOL": "BTC",
        "INVESTMENT_ANALYSIS_POINTER": None,
        "INVESTMENT_ANALYSIS": "analysis text",
        "DEEP_DIVE": None,
        "CODE_REVIEW": "review text",
    },
]

TOKENS = [
    {
        "TOKEN_ID": 3375,
        "TOKEN_SYMBOL": "BTC",
        "TOKEN_NAME": "Bitcoin",
        "CATEGORY": "Layer 1",
        "MARKET_CAP": 1.2e12,
        "VOLUME_24H": 3.1e10,
    },
    {
        "TOKEN_ID": 3306,
        "TOKEN_SYMBOL": "ETH",
        "TOKEN_NAME": "Ethereum",
        "CATEGORY": "Smart Contract Platform",
        "MARKET_CAP": 4.0e11,
    },
]


def make_client(
    signals: UpstreamResponse | None = None,
    grades: UpstreamResponse | Exception | None = None,
    reports: UpstreamResponse | Exception | None = None,
    tokens: UpstreamResponse | Exception | None = None,
) -> AsyncMock:
    """Build a mocked DataClient returning the given envelopes.

    Unset feeds default to the sample payloads above. Passing an exception
    makes that fetch raise it.
    """
    client = AsyncMock(spec=DataClient)
    client.fetch_trading_signals = AsyncMock(
        return_value=signals or UpstreamResponse.ok([dict(s) for s in SIGNALS])
    )

    def _wire(name: str, value, default: list[dict]) -> None:
        if isinstance(value, Exception):
            setattr(client, name, AsyncMock(side_effect=value))
        else:
            setattr(
                client,
                name,
                AsyncMock(return_value=value or UpstreamResponse.ok([dict(r) for r in default])),
            )

    _wire("fetch_trader_grades", grades, GRADES)
    _wire("fetch_ai_reports", reports, REPORTS)
    _wire("fetch_tokens", tokens, TOKENS)
    return client


@pytest.fixture
def upstream_settings() -> UpstreamSettings:
    """Upstream settings pointing at a fake host with a dummy key."""
    return UpstreamSettings(
        api_key="test-api-key",  # type: ignore[arg-type]
        base_url="https://tm.test/v2",
        timeout_seconds=5.0,
        payment_token="usdc",
    )


@pytest.fixture
def mock_settings(upstream_settings: UpstreamSettings) -> AppSettings:
    """Return AppSettings with test defaults."""
    return AppSettings(
        log_level="DEBUG",
        upstream=upstream_settings,
        cache=CacheSettings(ttl_seconds=300),
    )


@pytest.fixture
def mock_client() -> AsyncMock:
    """DataClient mock serving the sample payloads."""
    return make_client()


class FakeClock:
    """Manually advanced monotonic clock for cache tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client_factory():
    """Factory fixture: ``client_factory(grades=UpstreamResponse.failure(...))``."""
    return make_client
