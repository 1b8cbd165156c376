"""Tests for the background radar cache refresh loop."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from radar.aggregator import SignalAggregator
from radar.cache import ResponseCache
from radar.dashboard.app import create_radar_app
from radar.dashboard.refresh_loop import radar_refresh_loop
from radar.exceptions import AggregationError
from radar.models import SignalFilter


async def _run_briefly(app) -> None:
    task = asyncio.create_task(radar_refresh_loop(app))
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task


class TestRadarRefreshLoop:

    @pytest.mark.asyncio
    async def test_refreshes_last_filter(self, client_factory) -> None:
        client = client_factory()
        cache = ResponseCache()
        app = create_radar_app(
            aggregator=SignalAggregator(client, cache=cache),
            data_client=client,
            refresh_interval=0,
        )
        app.state.last_filter = SignalFilter(marketcap=1e6)

        await _run_briefly(app)

        assert cache.key == "1000000-"
        assert cache.get("1000000-").count == 3
        assert client.fetch_trading_signals.await_args.kwargs["marketcap"] == 1e6

    @pytest.mark.asyncio
    async def test_survives_refresh_errors(self, client_factory) -> None:
        client = client_factory()
        app = create_radar_app(
            aggregator=SignalAggregator(client, cache=ResponseCache()),
            data_client=client,
            refresh_interval=0,
        )
        app.state.aggregator.refresh = AsyncMock(side_effect=AggregationError("boom"))

        await _run_briefly(app)

        # kept looping after the first failure
        assert app.state.aggregator.refresh.await_count > 1
