"""FastAPI application factory for the radar API."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from radar.aggregator import SignalAggregator
from radar.dashboard.routes import api
from radar.models import SignalFilter
from radar.upstream.client import DataClient


def create_radar_app(
    aggregator: SignalAggregator,
    data_client: DataClient,
    lifespan: Any = None,
    refresh_interval: int = 300,
) -> FastAPI:
    """Create and configure the FastAPI radar application.

    Args:
        aggregator: Signal aggregator (with its injected response cache).
        data_client: Upstream client, used directly for single-token reports.
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to inject startup/shutdown logic.
        refresh_interval: Seconds between background cache refreshes.

    Returns:
        Configured FastAPI application with routes mounted under /api.
    """
    app = FastAPI(
        title="Signal Radar",
        lifespan=lifespan,
    )

    app.state.aggregator = aggregator
    app.state.data_client = data_client
    app.state.refresh_interval = refresh_interval

    # Filter most recently requested by a client; the refresh loop re-warms it
    app.state.last_filter = SignalFilter()

    app.include_router(api.router, prefix="/api")

    return app
