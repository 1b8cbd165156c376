"""Data models for the signal radar.

Raw upstream records keep the Token Metrics field names on the wire
(TOKEN_ID, TM_TRADER_GRADE, ...) and are parsed into dataclasses via
``from_api``. AggregatedSignal serialises with the camelCase keys the
radar page consumes.
"""

import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

TokenId = int | str

#: Trader grade used when neither the signal nor the grade feed carries one.
DEFAULT_TRADER_GRADE = 70.0

#: Directional signal values.
BULLISH = 1
NEUTRAL = 0
BEARISH = -1


def _to_float(value: Any) -> float | None:
    """Coerce an upstream numeric field to float.

    None when absent, unparseable or non-finite (NaN, +/-inf).
    """
    if value is None or value == "":
        return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    # NaN/inf would poison the grade sort and break strict JSON encoding
    return result if math.isfinite(result) else None


def _to_text(value: Any) -> str | None:
    """Return a stripped string, or None for missing/blank values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _now_ms() -> int:
    return int(time.time() * 1000)


class AggregationStatus(str, Enum):
    """Outcome discriminator for a radar response."""

    OK = "ok"
    EMPTY = "empty"
    UPSTREAM_ERROR = "upstream_error"


@dataclass
class Signal:
    """A trading signal for one token as returned by the upstream API."""

    token_id: TokenId
    symbol: str | None = None
    name: str | None = None
    date: str | None = None
    trading_signal: int = NEUTRAL
    trading_returns: float | None = None
    holding_returns: float | None = None
    tm_link: str | None = None
    trader_grade: float | None = None

    @classmethod
    def from_api(cls, raw: dict) -> "Signal":
        raw_signal = _to_float(raw.get("TRADING_SIGNAL"))
        return cls(
            token_id=raw["TOKEN_ID"],
            symbol=_to_text(raw.get("TOKEN_SYMBOL")),
            name=_to_text(raw.get("TOKEN_NAME")),
            date=_to_text(raw.get("DATE")),
            trading_signal=int(raw_signal) if raw_signal is not None else NEUTRAL,
            trading_returns=_to_float(raw.get("TRADING_SIGNALS_RETURNS")),
            holding_returns=_to_float(raw.get("HOLDING_RETURNS")),
            # Older payloads use the lowercase key
            tm_link=_to_text(raw.get("TM_LINK") or raw.get("tm_link")),
            trader_grade=_to_float(raw.get("TM_TRADER_GRADE")),
        )


@dataclass
class Grade:
    """Trader grade snapshot for one token."""

    token_id: TokenId
    trader_grade: float | None = None
    change_24h_pct: float | None = None

    @classmethod
    def from_api(cls, raw: dict) -> "Grade":
        return cls(
            token_id=raw["TOKEN_ID"],
            trader_grade=_to_float(raw.get("TM_TRADER_GRADE")),
            change_24h_pct=_to_float(raw.get("TM_TRADER_GRADE_24H_PCT_CHANGE")),
        )


@dataclass
class Report:
    """AI-generated analysis for one token. Any section may be missing."""

    token_id: TokenId
    investment_analysis_pointer: str | None = None
    investment_analysis: str | None = None
    deep_dive: str | None = None
    code_review: str | None = None

    @classmethod
    def from_api(cls, raw: dict) -> "Report":
        return cls(
            token_id=raw["TOKEN_ID"],
            investment_analysis_pointer=_to_text(raw.get("INVESTMENT_ANALYSIS_POINTER")),
            investment_analysis=_to_text(raw.get("INVESTMENT_ANALYSIS")),
            deep_dive=_to_text(raw.get("DEEP_DIVE")),
            code_review=_to_text(raw.get("CODE_REVIEW")),
        )

    @property
    def sections(self) -> list[str | None]:
        """Sections in display order."""
        return [
            self.investment_analysis_pointer,
            self.investment_analysis,
            self.deep_dive,
            self.code_review,
        ]


@dataclass
class TokenInfo:
    """Token metadata from the free tokens endpoint."""

    token_id: TokenId
    symbol: str | None = None
    name: str | None = None
    category: str | None = None
    market_cap: float | None = None
    volume_24h: float | None = None

    @classmethod
    def from_api(cls, raw: dict) -> "TokenInfo":
        return cls(
            token_id=raw["TOKEN_ID"],
            symbol=_to_text(raw.get("TOKEN_SYMBOL")),
            name=_to_text(raw.get("TOKEN_NAME")),
            category=_to_text(raw.get("CATEGORY")),
            market_cap=_to_float(raw.get("MARKET_CAP")),
            volume_24h=_to_float(raw.get("VOLUME_24H")),
        )


@dataclass
class AggregatedSignal:
    """One radar blip: a signal joined with grade, report and metadata."""

    id: TokenId
    symbol: str
    name: str
    signal: int
    signal_date: str | None
    trader_grade: float
    trader_grade_change: float
    trading_returns: float
    holding_returns: float
    returns_delta: float  # trading_returns - holding_returns
    ai_report: str | None
    tm_link: str | None
    angle: float  # radians, (-pi, pi]
    distance: float  # 0 .. ~1.131
    category: str
    marketcap: float | None = None
    volume: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise with the camelCase keys the radar page expects."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "signal": self.signal,
            "signalDate": self.signal_date,
            "traderGrade": self.trader_grade,
            "traderGradeChange": self.trader_grade_change,
            "tradingReturns": self.trading_returns,
            "holdingReturns": self.holding_returns,
            "returnsDelta": self.returns_delta,
            "aiReport": self.ai_report,
            "tmLink": self.tm_link,
            "angle": self.angle,
            "distance": self.distance,
            "category": self.category,
            "marketcap": self.marketcap,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class SignalFilter:
    """Optional market-cap and 24h-volume floors for the primary signal fetch."""

    marketcap: float | None = None
    volume: float | None = None

    @property
    def cache_key(self) -> str:
        """Serialised filter used as the cache slot key."""
        return f"{_format_floor(self.marketcap)}-{_format_floor(self.volume)}"


def _format_floor(value: float | None) -> str:
    if value is None:
        return ""
    # 1e9 and 1000000000.0 must produce the same key
    return str(int(value)) if float(value).is_integer() else str(value)


@dataclass
class RadarResponse:
    """Response envelope for a radar aggregation."""

    success: bool
    data: list[AggregatedSignal] = field(default_factory=list)
    timestamp: int = field(default_factory=_now_ms)
    status: AggregationStatus = AggregationStatus.OK
    message: str | None = None

    @property
    def count(self) -> int:
        return len(self.data)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": self.success,
            "data": [s.to_dict() for s in self.data],
            "timestamp": self.timestamp,
            "count": self.count,
            "status": self.status.value,
        }
        if self.message is not None:
            payload["message"] = self.message
        return payload
