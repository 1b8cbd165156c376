"""Periodic background refresh of the radar cache.

Re-aggregates the most recently requested filter so page loads after the
freshness window still hit a warm cache.
"""

from __future__ import annotations

import asyncio

import structlog
from fastapi import FastAPI

from radar.aggregator import SignalAggregator
from radar.models import SignalFilter

log = structlog.get_logger(__name__)


async def radar_refresh_loop(app: FastAPI) -> None:
    """Periodically refresh the cached radar response.

    Runs until the application shuts down. Each iteration:
    1. Sleeps for the configured refresh interval
    2. Reads the last filter a client asked for (unfiltered if none yet)
    3. Aggregates and overwrites the cache slot

    A refresh racing a request for a different filter may overwrite the
    slot; the next request for the other key then recomputes.

    Args:
        app: The FastAPI application with ``aggregator`` on its state.
    """
    interval = getattr(app.state, "refresh_interval", 300)

    log.info("radar_refresh_loop_started", interval=interval)

    while True:
        try:
            await asyncio.sleep(interval)

            aggregator: SignalAggregator = app.state.aggregator
            signal_filter: SignalFilter = (
                getattr(app.state, "last_filter", None) or SignalFilter()
            )
            response = await aggregator.refresh(signal_filter)
            log.debug(
                "radar_refreshed",
                key=signal_filter.cache_key,
                count=response.count,
                status=response.status.value,
            )

        except asyncio.CancelledError:
            log.info("radar_refresh_loop_cancelled")
            raise
        except Exception:
            log.warning("radar_refresh_error", exc_info=True)
