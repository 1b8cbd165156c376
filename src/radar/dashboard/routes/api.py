"""JSON API endpoints for the radar page: signals, AI reports and leaderboard."""

from __future__ import annotations

import time

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from radar.aggregator import SignalAggregator
from radar.exceptions import AggregationError, UpstreamError
from radar.leaderboard import build_leaderboard
from radar.models import BULLISH, SignalFilter
from radar.reports import fetch_report

log = structlog.get_logger(__name__)

router = APIRouter()


def _now_ms() -> int:
    return int(time.time() * 1000)


def _parse_floor(name: str, value: str | None) -> float | None:
    """Parse an optional numeric filter; blank means unfiltered."""
    if value is None or not value.strip():
        return None
    try:
        return float(value.strip())
    except ValueError as e:
        raise ValueError(f"Invalid {name} filter: {value!r}") from e


def _filter_from_query(request: Request) -> SignalFilter:
    params = request.query_params
    return SignalFilter(
        marketcap=_parse_floor("marketcap", params.get("marketcap")),
        volume=_parse_floor("volume", params.get("volume")),
    )


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        content={"success": False, "error": message, "timestamp": _now_ms()},
        status_code=status_code,
    )


async def _radar_response(request: Request, signal_filter: SignalFilter) -> JSONResponse:
    aggregator: SignalAggregator = request.app.state.aggregator
    request.app.state.last_filter = signal_filter

    try:
        response = await aggregator.get_radar(signal_filter)
    except AggregationError as e:
        log.error("radar_signals_failed", error=str(e), exc_info=True)
        return _error(str(e) or "Failed to fetch radar signals", 500)

    return JSONResponse(content=response.to_dict())


@router.get("/radar-signals")
async def get_radar_signals(request: Request) -> JSONResponse:
    """Bullish signals joined with grades, reports and radar position."""
    try:
        signal_filter = _filter_from_query(request)
    except ValueError as e:
        return _error(str(e), 422)
    return await _radar_response(request, signal_filter)


@router.post("/radar-signals")
async def refresh_radar_signals(request: Request) -> JSONResponse:
    """Clear the cache and re-aggregate without filters."""
    aggregator: SignalAggregator = request.app.state.aggregator
    if aggregator.cache is not None:
        aggregator.cache.invalidate()
    log.info("radar_cache_cleared_via_api")
    return await _radar_response(request, SignalFilter())


@router.post("/ai-report")
async def get_ai_report(request: Request) -> JSONResponse:
    """Fetch the combined AI report for a single token on demand."""
    try:
        body = await request.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    token_id = body.get("token_id")
    symbol = body.get("symbol")
    if not token_id:
        return JSONResponse(
            content={"success": False, "error": "Token ID is required"},
            status_code=400,
        )

    structlog.contextvars.bind_contextvars(token_id=token_id)
    try:
        report = await fetch_report(request.app.state.data_client, token_id)
    except UpstreamError as e:
        log.error("ai_report_failed", symbol=symbol, error=str(e))
        return JSONResponse(
            content={"success": False, "error": str(e) or "Failed to fetch AI report"},
            status_code=500,
        )
    finally:
        structlog.contextvars.unbind_contextvars("token_id")

    return JSONResponse(content={
        "success": True,
        "data": {
            "tokenId": token_id,
            "symbol": symbol,
            "aiReport": report,
            "timestamp": _now_ms(),
        },
    })


@router.get("/leaderboard")
async def get_leaderboard(request: Request) -> JSONResponse:
    """Trader grade leaderboard: one row per symbol, searchable and sortable."""
    params = request.query_params
    aggregator: SignalAggregator = request.app.state.aggregator

    try:
        signal_filter = _filter_from_query(request)
        radar = await aggregator.get_radar(signal_filter)
        rows = build_leaderboard(
            radar.data,
            search=params.get("search", ""),
            sort=params.get("sort", "grade"),  # type: ignore[arg-type]
            direction=params.get("direction", "desc"),  # type: ignore[arg-type]
        )
    except ValueError as e:
        return _error(str(e), 422)
    except AggregationError as e:
        log.error("leaderboard_failed", error=str(e), exc_info=True)
        return _error(str(e) or "Failed to build leaderboard", 500)

    with_reports = sum(1 for row in rows if row.ai_report)
    payload = {
        "success": True,
        "data": [
            {"rank": rank, **row.to_dict()} for rank, row in enumerate(rows, 1)
        ],
        "count": len(rows),
        "withReports": with_reports,
        "timestamp": radar.timestamp,
    }
    if radar.message is not None:
        payload["message"] = radar.message
    return JSONResponse(content=payload)


@router.get("/test-trading-signals")
async def test_trading_signals(request: Request) -> JSONResponse:
    """Diagnostic: call the trading signals endpoint directly and echo the result."""
    client = request.app.state.data_client
    result = await client.fetch_trading_signals(signal=BULLISH, limit=10)
    log.info("test_trading_signals", success=result.success, count=len(result.data))
    return JSONResponse(content={
        "test": "fetch_trading_signals",
        "result": {
            "success": result.success,
            "data": result.data,
            "error": result.error,
            "status_code": result.status_code,
        },
    })


@router.get("/health")
async def health(request: Request) -> JSONResponse:
    """Liveness plus cache slot state."""
    aggregator: SignalAggregator = request.app.state.aggregator
    cache = aggregator.cache
    age = cache.age() if cache is not None else None
    return JSONResponse(content={
        "status": "ok",
        "cache": {
            "key": cache.key if cache is not None else None,
            "age_seconds": round(age, 1) if age is not None else None,
        },
    })
