"""Entry point for the signal radar service.

Wires all components together and serves the FastAPI app via uvicorn's
programmatic API. The optional cache refresh loop shares the same event
loop through FastAPI's lifespan context manager.

Component wiring order (in _build_components):
1. AppSettings (configuration)
2. Logging setup
3. DataClient (TokenMetricsClient)
4. ResponseCache (single-slot TTL cache)
5. SignalAggregator (fetch, join, project)
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from radar.aggregator import SignalAggregator
from radar.cache import ResponseCache
from radar.config import AppSettings
from radar.logging import get_logger, setup_logging
from radar.upstream.token_metrics import TokenMetricsClient


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build the data client, cache and aggregator from settings.

    Args:
        settings: Application-wide settings.

    Returns:
        Dict mapping component names to instances.
    """
    logger = get_logger("radar.main")

    # 3. Create upstream client
    data_client = TokenMetricsClient(settings.upstream)

    if not settings.upstream.api_key.get_secret_value():
        logger.warning(
            "no_api_key_configured",
            note="Free endpoints may work. Paid endpoints will be rejected.",
        )

    # 4. Create response cache (one per process)
    cache = ResponseCache(ttl_seconds=settings.cache.ttl_seconds)

    # 5. Create aggregator
    aggregator = SignalAggregator(
        client=data_client,
        settings=settings.upstream,
        cache=cache,
    )

    return {
        "data_client": data_client,
        "cache": cache,
        "aggregator": aggregator,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the refresh loop (if enabled) and close the client on shutdown."""
    from radar.dashboard.refresh_loop import radar_refresh_loop

    logger = get_logger("radar.main")
    settings: AppSettings = app.state.settings

    refresh_task = None
    if settings.server.refresh_enabled:
        refresh_task = asyncio.create_task(radar_refresh_loop(app))

    logger.info("lifespan_started", refresh=settings.server.refresh_enabled)

    yield

    if refresh_task is not None:
        refresh_task.cancel()
        try:
            await refresh_task
        except asyncio.CancelledError:
            pass

    await app.state.data_client.close()

    logger.info("signal_radar_stopped")


async def run() -> None:
    """Run the signal radar API server."""
    # 1. Load settings
    settings = AppSettings()

    # 2. Setup logging
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("radar.main")

    # 3-5. Build components
    components = _build_components(settings)

    from radar.dashboard.app import create_radar_app

    app = create_radar_app(
        aggregator=components["aggregator"],
        data_client=components["data_client"],
        lifespan=lifespan,
        refresh_interval=settings.server.refresh_interval,
    )
    app.state.settings = settings

    logger.info(
        "starting_signal_radar",
        host=settings.server.host,
        port=settings.server.port,
        cache_ttl=settings.cache.ttl_seconds,
    )

    config = uvicorn.Config(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
