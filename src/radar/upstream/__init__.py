"""Upstream market-data layer -- Token Metrics API integration via httpx."""

from radar.upstream.client import DataClient
from radar.upstream.token_metrics import TokenMetricsClient
from radar.upstream.types import UpstreamResponse, join_token_ids

__all__ = ["DataClient", "TokenMetricsClient", "UpstreamResponse", "join_token_ids"]
