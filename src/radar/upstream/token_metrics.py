"""Token Metrics data API client via httpx async.

Wraps httpx.AsyncClient with API-key auth, endpoint routing and
failure-to-envelope conversion. Paid endpoints carry the payment token
selector; settlement itself happens behind the API gateway.
"""

from typing import Any

import httpx

from radar.config import PaymentToken, UpstreamSettings
from radar.logging import get_logger
from radar.upstream.client import DataClient
from radar.upstream.types import UpstreamResponse, join_token_ids

logger = get_logger(__name__)

TRADING_SIGNALS = "trading-signals"
TRADER_GRADES = "trader-grades"
AI_REPORTS = "ai-reports"
TOKENS = "tokens"


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _extract_records(payload: Any) -> list[dict]:
    """Pull the record list out of a response body.

    The API wraps records as ``{"success": ..., "data": [...]}`` but some
    endpoints return the bare list.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return [data]
    return []


class TokenMetricsClient(DataClient):
    """Concrete Token Metrics client using httpx async.

    Args:
        settings: Upstream connection settings (base URL, key, timeout).
        transport: Optional httpx transport, used by tests to stub the API.
    """

    def __init__(
        self,
        settings: UpstreamSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        headers = {"Accept": "application/json"}
        api_key = settings.api_key.get_secret_value()
        if api_key:
            headers["x-api-key"] = api_key

        self._http = httpx.AsyncClient(
            base_url=settings.base_url.rstrip("/") + "/",
            headers=headers,
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP connection pool. Must be called on shutdown."""
        logger.info("closing_token_metrics_client")
        await self._http.aclose()

    async def _get(
        self,
        endpoint: str,
        params: dict[str, Any],
        payment_token: PaymentToken | None = None,
    ) -> UpstreamResponse:
        """GET an endpoint and convert every failure mode into an envelope."""
        query = {k: v for k, v in params.items() if v is not None and v != ""}
        headers = {}
        if payment_token is not None:
            headers["x-payment-token"] = payment_token

        try:
            response = await self._http.get(endpoint, params=query, headers=headers)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(
                "upstream_http_error", endpoint=endpoint, status_code=status
            )
            return UpstreamResponse.failure(
                f"{status} {e.response.reason_phrase}".strip(), status_code=status
            )
        except httpx.HTTPError as e:
            logger.warning("upstream_transport_error", endpoint=endpoint, error=str(e))
            return UpstreamResponse.failure(str(e) or type(e).__name__)
        except ValueError as e:
            logger.warning("upstream_invalid_json", endpoint=endpoint, error=str(e))
            return UpstreamResponse.failure(f"Invalid JSON from {endpoint}")

        if isinstance(payload, dict) and payload.get("success") is False:
            error = payload.get("message") or payload.get("error") or "Request failed"
            return UpstreamResponse.failure(str(error))

        records = _extract_records(payload)
        logger.debug("upstream_fetched", endpoint=endpoint, count=len(records))
        return UpstreamResponse.ok(records)

    def _payment(self, payment_token: PaymentToken | None) -> PaymentToken:
        return payment_token or self._settings.payment_token

    async def fetch_trading_signals(
        self,
        signal: int | None = None,
        limit: int = 50,
        marketcap: float | None = None,
        volume: float | None = None,
        payment_token: PaymentToken | None = None,
    ) -> UpstreamResponse:
        params: dict[str, Any] = {
            "signal": str(signal) if signal is not None else None,
            "limit": limit,
            "marketcap": _format_number(marketcap) if marketcap is not None else None,
            "volume": _format_number(volume) if volume is not None else None,
        }
        return await self._get(TRADING_SIGNALS, params, self._payment(payment_token))

    async def fetch_trader_grades(
        self,
        token_ids: list,
        limit: int = 50,
        payment_token: PaymentToken | None = None,
    ) -> UpstreamResponse:
        params = {"token_id": join_token_ids(token_ids), "limit": limit}
        return await self._get(TRADER_GRADES, params, self._payment(payment_token))

    async def fetch_ai_reports(
        self,
        token_ids: list,
        limit: int = 50,
        payment_token: PaymentToken | None = None,
    ) -> UpstreamResponse:
        params = {"token_id": join_token_ids(token_ids), "limit": limit}
        return await self._get(AI_REPORTS, params, self._payment(payment_token))

    async def fetch_tokens(
        self,
        token_ids: list,
        limit: int = 50,
    ) -> UpstreamResponse:
        params = {"token_id": join_token_ids(token_ids), "limit": limit}
        return await self._get(TOKENS, params)
