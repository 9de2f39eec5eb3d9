"""Pending wager engine - game submission, grouping views and maintenance."""

import logging
from uuid import uuid4

from app.models.wager import RemoveGameRequest, SubmitGameRequest, WagerCreate
from app.services.game_grouper import Game, group_games, remove_orphans
from app.services.ledger_errors import NotFoundError, ValidationError
from app.services.ledger_repository import PENDING_WAGERS, LedgerRepository
from app.services.wager_matcher import match_game, resolve_criteria
from app.utils import utc_iso

logger = logging.getLogger("wagerbook.wager_service")


def _wager_doc(wager: WagerCreate, game_id: str, created_at: str) -> dict:
    doc = {
        "sport": wager.sport,
        "team": wager.team,
        "type": wager.type.value,
        "risk": wager.risk,
        "to_win": wager.to_win,
        "date": wager.date,
        "game_id": game_id,
        "created_at": created_at,
    }
    if wager.game_key:
        doc["game_key"] = wager.game_key
    return doc


async def submit_game(
    request: SubmitGameRequest, repository: LedgerRepository | None = None,
) -> tuple[str, list[dict]]:
    """Persist both sides under one freshly generated gameId."""
    repo = repository or LedgerRepository()
    game_id = uuid4().hex
    created_at = utc_iso()
    docs = [
        _wager_doc(request.fav_wager, game_id, created_at),
        _wager_doc(request.dog_wager, game_id, created_at),
    ]
    await repo.append(PENDING_WAGERS, docs)
    logger.info(
        "Game submitted: game_id=%s sport=%s date=%s %s vs %s",
        game_id, request.fav_wager.sport, request.fav_wager.date,
        request.fav_wager.team, request.dog_wager.team,
    )
    return game_id, docs


async def list_pending(repository: LedgerRepository | None = None) -> list[dict]:
    repo = repository or LedgerRepository()
    return await repo.read_all(PENDING_WAGERS)


async def list_games(repository: LedgerRepository | None = None) -> list[Game]:
    """Complete, actionable games only."""
    return group_games(await list_pending(repository))


async def cleanup_orphans(repository: LedgerRepository | None = None) -> tuple[int, int]:
    """Delete unpaired legacy records. Returns (removed_count, kept_count)."""
    repo = repository or LedgerRepository()
    pending = await repo.read_all(PENDING_WAGERS)
    cleanup = remove_orphans(pending)
    if not cleanup.removed:
        return 0, len(cleanup.kept)

    ids = [w["_id"] for w in cleanup.removed]
    removed = await repo.delete_where(PENDING_WAGERS, {"_id": {"$in": ids}})
    logger.info("Orphan cleanup: removed=%d kept=%d", removed, len(cleanup.kept))
    return removed, len(cleanup.kept)


async def remove_game(
    request: RemoveGameRequest, repository: LedgerRepository | None = None,
) -> int:
    """Delete both sides of one pending game without recording any outcome."""
    repo = repository or LedgerRepository()
    criteria = resolve_criteria(
        game_id=request.game_id,
        game_key=request.game_key,
        sport=request.sport,
        date=request.date,
        teams=request.teams,
    )
    matched = match_game(criteria, await repo.read_all(PENDING_WAGERS))
    removed = await repo.delete_where(PENDING_WAGERS, matched.removal_query())
    if removed == 0:
        raise NotFoundError("Game is no longer pending.")
    logger.info("Game removed from pending: criteria=%s removed=%d", type(criteria).__name__, removed)
    return removed


async def delete_pending_at(index: int, repository: LedgerRepository | None = None) -> None:
    """Delete the pending record at a stored position (raw maintenance view)."""
    repo = repository or LedgerRepository()
    pending = await repo.read_all(PENDING_WAGERS)
    if index < 0 or index >= len(pending):
        raise ValidationError("Invalid index")
    await repo.delete_where(PENDING_WAGERS, {"_id": pending[index]["_id"]}, just_one=True)


async def clear_pending(repository: LedgerRepository | None = None) -> int:
    repo = repository or LedgerRepository()
    removed = await repo.replace_all(PENDING_WAGERS, [])
    logger.info("Pending wagers cleared: removed=%d", removed)
    return removed
