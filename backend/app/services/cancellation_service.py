"""
backend/app/services/cancellation_service.py

Purpose:
    Void a single pending side without a settlement event. The wager is
    removed and converted into a deficit that credits its to-win amount
    (not its risk): money never collected, as opposed to money lost.

Dependencies:
    - app.services.ledger_writer
    - app.services.ledger_repository
"""

from __future__ import annotations

import logging
from datetime import datetime

from app.models.wager import CancelWagerRequest
from app.services.ledger_errors import NotFoundError, ValidationError
from app.services.ledger_repository import PENDING_WAGERS, LedgerRepository
from app.services.ledger_writer import LedgerWriter
from app.services.wager_matcher import team_name
from app.utils import utc_iso

logger = logging.getLogger("wagerbook.cancellation_service")


def locate_wager(request: CancelWagerRequest, pending: list[dict]) -> dict:
    """First pending record matching team plus gameId, gameKey, or sport+date."""
    team = team_name(request.team)
    if not team:
        raise ValidationError("Team is required.")

    if request.game_id:
        def matches(w: dict) -> bool:
            return w.get("game_id") == request.game_id
    elif request.game_key:
        def matches(w: dict) -> bool:
            return w.get("game_key") == request.game_key
    elif request.sport and request.date:
        def matches(w: dict) -> bool:
            return w.get("sport") == request.sport and w.get("date") == request.date
    else:
        raise ValidationError("Missing gameId, gameKey or sport/date.")

    for wager in pending:
        if matches(wager) and team_name(wager.get("team")) == team:
            return wager
    raise NotFoundError(f"No pending wager for team '{team}'.")


def build_cancellation_deficit(wager: dict, now: datetime | None = None) -> dict:
    to_win = float(wager.get("to_win") or 0)
    return {
        "team": wager.get("team"),
        "type": wager.get("type"),
        "risk": float(wager.get("risk") or 0),
        "to_win": to_win,
        "deficit": to_win,
        "sport": wager.get("sport"),
        "date": wager.get("date"),
        "settled_at": utc_iso(now),
        "from_cancellation": True,
    }


async def cancel_wager(
    request: CancelWagerRequest,
    *,
    repository: LedgerRepository | None = None,
    now: datetime | None = None,
) -> dict:
    """Remove one pending wager and return the deficit created for it."""
    repo = repository or LedgerRepository()
    if not (request.game_id or request.game_key or (request.sport and request.date)):
        raise ValidationError("Missing gameId, gameKey or sport/date.")

    pending = await repo.read_all(PENDING_WAGERS)
    wager = locate_wager(request, pending)
    deficit = build_cancellation_deficit(wager, now)

    await LedgerWriter(repo).write_cancellation(wager, deficit)
    logger.info(
        "Wager cancelled: team=%s sport=%s date=%s credited=%.2f",
        wager.get("team"), wager.get("sport"), wager.get("date"), deficit["deficit"],
    )
    return deficit
