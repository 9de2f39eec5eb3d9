"""
backend/app/services/ledger_aggregator.py

Purpose:
    Reporting aggregates over the ledger: rolling-window net, settled counts,
    per-day totals, pending totals and deficit reapply amounts.

    Window membership always anchors on a record's own ``date`` field, never
    on ``settled_at``.

Dependencies:
    - app.utils
    - app.services.ledger_repository
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from app.config import settings
from app.services.ledger_repository import (
    DEFICITS,
    PENDING_WAGERS,
    SETTLED_ENTRIES,
    LedgerRepository,
)
from app.utils import parse_wager_date, to_local_naive


def _num(value: Any) -> float:
    try:
        if value is None or value == "":
            return 0.0
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def in_window(date_value: Any, window_hours: float, now: datetime) -> bool:
    """True when ``now - date < window_hours``. Unparseable dates are excluded."""
    if not date_value:
        return False
    try:
        parsed = to_local_naive(parse_wager_date(date_value))
    except ValueError:
        return False
    return to_local_naive(now) - parsed < timedelta(hours=window_hours)


def rolling_net(
    window_hours: float,
    settled: list[dict],
    deficits: list[dict],
    now: datetime | None = None,
) -> float:
    """Net result over the window.

    When any settled record carries ``amount`` the net is the sum of in-window
    amounts. Otherwise (legacy data) it is in-window to-win minus in-window
    deficits. The two modes are never combined.
    """
    now = now or datetime.now()
    if any(entry.get("amount") is not None for entry in settled):
        return sum(
            _num(entry.get("amount"))
            for entry in settled
            if in_window(entry.get("date"), window_hours, now)
        )

    won = sum(
        _num(entry.get("to_win"))
        for entry in settled
        if in_window(entry.get("date"), window_hours, now)
    )
    lost = sum(
        _num(d.get("deficit"))
        for d in deficits
        if in_window(d.get("date"), window_hours, now)
    )
    return won - lost


def settled_count_in_window(
    window_hours: float, settled: list[dict], now: datetime | None = None,
) -> int:
    now = now or datetime.now()
    return sum(1 for entry in settled if in_window(entry.get("date"), window_hours, now))


def _utc_day(value: Any) -> str | None:
    if not value:
        return None
    text = str(value)
    if len(text) <= 10:
        return text
    try:
        parsed = parse_wager_date(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def daily_totals(settled: list[dict]) -> list[dict]:
    """Per-day totals keyed by the UTC day of ``settled_at`` (falling back to ``date``)."""
    days: dict[str, dict] = {}
    for entry in settled:
        day = _utc_day(entry.get("settled_at") or entry.get("date"))
        if day is None:
            continue
        totals = days.setdefault(day, {
            "date": day,
            "total_wagered": 0.0,
            "total_to_win": 0.0,
            "net_amount": 0.0,
            "entries": 0,
        })
        totals["total_wagered"] += _num(entry.get("risk"))
        totals["total_to_win"] += _num(entry.get("to_win"))
        totals["net_amount"] += _num(entry.get("amount"))
        totals["entries"] += 1
    return [days[d] for d in sorted(days)]


def pending_totals(wagers: list[dict]) -> dict[str, float]:
    return {
        "total_risked": sum(_num(w.get("risk")) for w in wagers),
        "total_to_win": sum(_num(w.get("to_win")) for w in wagers),
    }


def total_deficit(deficits: list[dict]) -> float:
    return sum(_num(d.get("deficit")) for d in deficits)


def reapply_amount(deficit: dict) -> float:
    """Amount a deficit contributes when applied to a future wager.

    Cancellation credits surface their to-win; loss debits surface risk + to-win.
    """
    if deficit.get("from_cancellation"):
        return round(_num(deficit.get("to_win")), 2)
    return round(_num(deficit.get("risk")) + _num(deficit.get("to_win")), 2)


def sort_for_reapply(deficits: list[dict]) -> list[dict]:
    """Highest combined risk + to-win first; ties keep stored order."""
    return sorted(
        deficits,
        key=lambda d: _num(d.get("risk")) + _num(d.get("to_win")),
        reverse=True,
    )


async def load_ledger_summary(
    *,
    repository: LedgerRepository | None = None,
    window_hours: int | None = None,
    now: datetime | None = None,
) -> dict:
    repo = repository or LedgerRepository()
    hours = window_hours or settings.ROLLING_WINDOW_HOURS
    settled = await repo.read_all(SETTLED_ENTRIES)
    deficits = await repo.read_all(DEFICITS)
    pending = await repo.read_all(PENDING_WAGERS)

    net = rolling_net(hours, settled, deficits, now)
    deficit_sum = total_deficit(deficits)
    totals = pending_totals(pending)
    return dict(
        window_hours=hours,
        rolling_net=round(net, 2),
        settled_count=settled_count_in_window(hours, settled, now),
        total_deficit=round(deficit_sum, 2),
        net_profit=round(net - deficit_sum, 2),
        pending_total_risked=round(totals["total_risked"], 2),
        pending_total_to_win=round(totals["total_to_win"], 2),
    )
