"""Trader grade leaderboard built from aggregated radar signals."""

from typing import Literal

from radar.models import AggregatedSignal

SortField = Literal["rank", "symbol", "grade", "change"]
SortDirection = Literal["asc", "desc"]

SORT_FIELDS: tuple[str, ...] = ("rank", "symbol", "grade", "change")


def dedupe_by_symbol(signals: list[AggregatedSignal]) -> list[AggregatedSignal]:
    """Keep one signal per symbol, the one with the highest trader grade.

    On equal grades the first seen wins. Survivors keep first-seen order.
    """
    best: dict[str, AggregatedSignal] = {}
    for signal in signals:
        current = best.get(signal.symbol)
        if current is None or signal.trader_grade > current.trader_grade:
            best[signal.symbol] = signal
    return list(best.values())


def build_leaderboard(
    signals: list[AggregatedSignal],
    search: str = "",
    sort: SortField = "grade",
    direction: SortDirection = "desc",
) -> list[AggregatedSignal]:
    """De-duplicate, filter by symbol/name substring and sort.

    ``rank`` keeps the incoming order (already grade-descending from the
    aggregator); the other fields sort stably in the requested direction.

    Raises:
        ValueError: On an unknown sort field or direction.
    """
    if sort not in SORT_FIELDS:
        raise ValueError(f"Unknown sort field: {sort}")
    if direction not in ("asc", "desc"):
        raise ValueError(f"Unknown sort direction: {direction}")

    rows = dedupe_by_symbol(signals)

    term = search.strip().lower()
    if term:
        rows = [
            s for s in rows
            if term in s.symbol.lower() or term in s.name.lower()
        ]

    if sort == "rank":
        return rows

    reverse = direction == "desc"
    if sort == "symbol":
        return sorted(rows, key=lambda s: s.symbol, reverse=reverse)
    if sort == "grade":
        return sorted(rows, key=lambda s: s.trader_grade, reverse=reverse)
    return sorted(rows, key=lambda s: s.trader_grade_change, reverse=reverse)
