"""
backend/app/services/settlement_service.py

Purpose:
    Settle a matched Fav/Dog game: partition the matched wagers by the
    reported winner, derive signed settled entries and loss deficits, then
    hand the complete result to the LedgerWriter in one step. Also serves the
    settled-entries listing and reset.

Dependencies:
    - app.services.wager_matcher
    - app.services.ledger_writer
    - app.services.ledger_repository
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.models.ledger import OutcomeType
from app.models.wager import SettleGameRequest
from app.services.ledger_errors import PartitionError, ValidationError
from app.services.ledger_repository import PENDING_WAGERS, SETTLED_ENTRIES, LedgerRepository
from app.services.ledger_writer import LedgerWriter
from app.services.wager_matcher import MatchedGame, match_game, resolve_criteria, team_name
from app.utils import ensure_utc, utc_iso, utcnow

logger = logging.getLogger("wagerbook.settlement_service")


@dataclass
class SettlementResult:
    settled: list[dict]
    deficits: list[dict]
    winners: int
    losers: int
    removal_query: dict
    matched_count: int


def _wager_fields(wager: dict) -> dict:
    return {k: v for k, v in wager.items() if k != "_id"}


def _settled_entry(wager: dict, amount: float, outcome: OutcomeType, settled_at: str) -> dict:
    entry = _wager_fields(wager)
    entry["amount"] = amount
    entry["settled_at"] = settled_at
    entry["type"] = outcome.value
    return entry


def _loss_deficit(wager: dict, settled_at: str) -> dict:
    risk = float(wager.get("risk") or 0)
    return {
        "team": wager.get("team"),
        "type": wager.get("type"),
        "risk": risk,
        "to_win": float(wager.get("to_win") or 0),
        "deficit": risk,
        "sport": wager.get("sport"),
        "date": wager.get("date"),
        "settled_at": settled_at,
        "from_cancellation": False,
    }


def resolve_settlement(
    matched: MatchedGame, winning_team: str, now: datetime | None = None,
) -> SettlementResult:
    """Compute every derived record for a settlement without touching the store."""
    winner_name = team_name(winning_team)
    if not winner_name:
        raise ValidationError("Winner team is required.")

    winners = [w for w in matched.records if team_name(w.get("team")) == winner_name]
    losers = [w for w in matched.records if team_name(w.get("team")) != winner_name]
    if not winners:
        raise PartitionError(f"Winner '{winner_name}' does not match any wager of the game.")
    if not losers:
        raise PartitionError(f"Every matched wager belongs to '{winner_name}'; no losing side.")

    base = ensure_utc(now or utcnow())
    settled_at = utc_iso(base)
    settled = [
        _settled_entry(w, float(w.get("to_win") or 0), OutcomeType.win, settled_at)
        for w in winners
    ]
    settled += [
        _settled_entry(w, -abs(float(w.get("risk") or 0)), OutcomeType.loss, settled_at)
        for w in losers
    ]
    # Deficits are addressed by settled_at, so each loser gets its own microsecond.
    deficits = [
        _loss_deficit(w, utc_iso(base + timedelta(microseconds=i)))
        for i, w in enumerate(losers)
    ]

    return SettlementResult(
        settled=settled,
        deficits=deficits,
        winners=len(winners),
        losers=len(losers),
        removal_query=matched.removal_query(),
        matched_count=len(matched.records),
    )


async def settle_game(
    request: SettleGameRequest,
    *,
    repository: LedgerRepository | None = None,
    now: datetime | None = None,
) -> SettlementResult:
    """Match, resolve and persist one settlement."""
    repo = repository or LedgerRepository()
    criteria = resolve_criteria(
        game_id=request.game_id,
        game_key=request.game_key,
        sport=request.sport,
        date=request.date,
        teams=request.teams,
    )
    pending = await repo.read_all(PENDING_WAGERS)
    matched = match_game(criteria, pending)
    result = resolve_settlement(matched, request.winner.team, now)

    await LedgerWriter(repo).write_settlement(
        result.removal_query, result.matched_count, result.settled, result.deficits,
    )
    logger.info(
        "Game settled: criteria=%s winner=%s winners=%d losers=%d",
        type(criteria).__name__, request.winner.team, result.winners, result.losers,
    )
    return result


async def list_settled(repository: LedgerRepository | None = None) -> list[dict]:
    repo = repository or LedgerRepository()
    return await repo.read_all(SETTLED_ENTRIES)


async def reset_settled(repository: LedgerRepository | None = None) -> int:
    """Clear the whole settled collection. Individual entries are never edited."""
    repo = repository or LedgerRepository()
    removed = await repo.replace_all(SETTLED_ENTRIES, [])
    logger.info("Settled entries reset: removed=%d", removed)
    return removed
