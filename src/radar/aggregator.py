"""Signal aggregator merging upstream feeds into radar records.

The SignalAggregator is the top-level coordinator that:
1. Fetches bullish trading signals (the primary feed)
2. Fans out to trader grades, AI reports and token metadata for exactly
   that batch of tokens, concurrently
3. Joins the four feeds by token id and derives grade, returns delta,
   combined report and radar position
4. Returns the records sorted by trader grade, highest first

Graceful degradation: a failed primary fetch becomes an empty successful
response with an explanatory message, and a failed secondary fetch only
blanks the fields it would have filled. Only unexpected errors during the
join surface, as AggregationError.
"""

from __future__ import annotations

import asyncio
from typing import TypeVar

import structlog

from radar.cache import ResponseCache
from radar.config import UpstreamSettings
from radar.exceptions import AggregationError
from radar.logging import get_logger
from radar.models import (
    BULLISH,
    DEFAULT_TRADER_GRADE,
    AggregatedSignal,
    AggregationStatus,
    Grade,
    RadarResponse,
    Report,
    Signal,
    SignalFilter,
    TokenInfo,
)
from radar.projection import project
from radar.reports import combine_sections
from radar.upstream.client import DataClient
from radar.upstream.types import UpstreamResponse

logger = get_logger(__name__)

UNSUPPORTED_FILTER_MESSAGE = (
    "The requested filters are not supported by the API. Try different criteria."
)

R = TypeVar("R", Grade, Report, TokenInfo)


def _index_by_token(
    source: str,
    result: UpstreamResponse | BaseException,
    parse: type[R],
) -> dict[str, R]:
    """Index one secondary feed by token id, first record per id wins.

    A failed or raising fetch yields an empty index so the join falls back.
    """
    if isinstance(result, BaseException):
        logger.warning("secondary_fetch_raised", source=source, error=str(result))
        return {}
    if not result.success:
        logger.warning("secondary_fetch_failed", source=source, error=result.error)
        return {}

    index: dict[str, R] = {}
    for raw in result.data:
        if not isinstance(raw, dict) or raw.get("TOKEN_ID") is None:
            continue
        index.setdefault(str(raw["TOKEN_ID"]), parse.from_api(raw))
    return index


def build_record(
    signal: Signal,
    grade: Grade | None,
    report: Report | None,
    info: TokenInfo | None,
) -> AggregatedSignal:
    """Join one signal with its optional grade, report and metadata."""
    if signal.trader_grade is not None:
        trader_grade = signal.trader_grade
    elif grade is not None and grade.trader_grade is not None:
        trader_grade = grade.trader_grade
    else:
        trader_grade = DEFAULT_TRADER_GRADE

    trading_returns = signal.trading_returns or 0.0
    holding_returns = signal.holding_returns or 0.0
    position = project(trader_grade, trading_returns)

    return AggregatedSignal(
        id=signal.token_id,
        symbol=signal.symbol or (info.symbol if info else None) or "UNKNOWN",
        name=signal.name or (info.name if info else None) or "Unknown Token",
        signal=signal.trading_signal,
        signal_date=signal.date,
        trader_grade=trader_grade,
        trader_grade_change=(grade.change_24h_pct if grade else None) or 0.0,
        trading_returns=trading_returns,
        holding_returns=holding_returns,
        returns_delta=trading_returns - holding_returns,
        ai_report=combine_sections(report),
        tm_link=signal.tm_link,
        angle=position.angle,
        distance=position.distance,
        category=(info.category if info else None) or "Unknown",
        marketcap=info.market_cap if info else None,
        volume=info.volume_24h if info else None,
    )


class SignalAggregator:
    """Builds the radar view model from the upstream data client.

    Args:
        client: Market-data client for the four upstream feeds.
        settings: Upstream settings (result cap per call).
        cache: Single-slot response cache. None disables caching.
    """

    def __init__(
        self,
        client: DataClient,
        settings: UpstreamSettings | None = None,
        cache: ResponseCache | None = None,
    ) -> None:
        self._client = client
        self._limit = settings.signal_limit if settings is not None else 50
        self._cache = cache

    @property
    def cache(self) -> ResponseCache | None:
        return self._cache

    async def get_radar(self, signal_filter: SignalFilter) -> RadarResponse:
        """Serve from cache when fresh, otherwise aggregate and store.

        Raises:
            AggregationError: On unexpected failures while joining feeds.
        """
        key = signal_filter.cache_key
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                logger.info("radar_cache_hit", key=key, count=cached.count)
                return cached

        return await self.refresh(signal_filter)

    async def refresh(self, signal_filter: SignalFilter) -> RadarResponse:
        """Aggregate unconditionally and overwrite the cache slot."""
        response = await self.aggregate(signal_filter)
        if self._cache is not None:
            self._cache.put(signal_filter.cache_key, response)
        return response

    async def aggregate(self, signal_filter: SignalFilter) -> RadarResponse:
        """Fetch, join and project bullish signals for the given filter.

        Returns:
            RadarResponse with ``success=True`` unless an unexpected error occurs.

        Raises:
            AggregationError: On unexpected failures while joining feeds.
        """
        structlog.contextvars.bind_contextvars(filter_key=signal_filter.cache_key)
        try:
            return await self._aggregate(signal_filter)
        finally:
            structlog.contextvars.unbind_contextvars("filter_key")

    async def _aggregate(self, signal_filter: SignalFilter) -> RadarResponse:
        logger.info(
            "fetching_bullish_signals",
            marketcap=signal_filter.marketcap,
            volume=signal_filter.volume,
        )
        try:
            primary = await self._client.fetch_trading_signals(
                signal=BULLISH,
                limit=self._limit,
                marketcap=signal_filter.marketcap,
                volume=signal_filter.volume,
            )
        except Exception as e:
            # Clients should return a failure envelope; treat a raise the same way
            logger.warning("trading_signals_fetch_raised", exc_info=True)
            primary = UpstreamResponse.failure(str(e) or type(e).__name__)

        if not primary.success:
            logger.error(
                "trading_signals_fetch_failed",
                error=primary.error,
                status_code=primary.status_code,
            )
            message = (
                UNSUPPORTED_FILTER_MESSAGE
                if primary.not_found
                else f"Failed to fetch signals: {primary.error}"
            )
            return RadarResponse(
                success=True,
                status=AggregationStatus.UPSTREAM_ERROR,
                message=message,
            )

        try:
            signals = [
                Signal.from_api(raw)
                for raw in primary.data
                if isinstance(raw, dict) and raw.get("TOKEN_ID") is not None
            ]
        except (TypeError, ValueError, OverflowError) as e:
            logger.error("trading_signals_parse_failed", exc_info=True)
            raise AggregationError(str(e)) from e

        if not signals:
            logger.info("no_bullish_signals")
            return RadarResponse(success=True, status=AggregationStatus.EMPTY)

        token_ids = [s.token_id for s in signals]
        grades_result, reports_result, tokens_result = await asyncio.gather(
            self._client.fetch_trader_grades(token_ids, limit=self._limit),
            self._client.fetch_ai_reports(token_ids, limit=self._limit),
            self._client.fetch_tokens(token_ids, limit=self._limit),
            return_exceptions=True,
        )

        grades = _index_by_token("trader_grades", grades_result, Grade)
        reports = _index_by_token("ai_reports", reports_result, Report)
        tokens = _index_by_token("tokens", tokens_result, TokenInfo)

        try:
            records = [
                build_record(
                    signal,
                    grades.get(str(signal.token_id)),
                    reports.get(str(signal.token_id)),
                    tokens.get(str(signal.token_id)),
                )
                for signal in signals
            ]
        except (TypeError, ValueError, AttributeError, OverflowError) as e:
            logger.error("radar_join_failed", exc_info=True)
            raise AggregationError(str(e)) from e

        # list.sort is stable: equal grades keep upstream order
        records.sort(key=lambda r: r.trader_grade, reverse=True)

        logger.info(
            "radar_ready",
            count=len(records),
            grades=len(grades),
            reports=len(reports),
            tokens=len(tokens),
        )
        return RadarResponse(success=True, data=records, status=AggregationStatus.OK)
