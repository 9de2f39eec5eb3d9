"""Pending wagers API - raw records, grouped games and maintenance."""

from typing import List

from fastapi import APIRouter

from app.models.ledger import DeleteResponse
from app.models.wager import (
    GameResponse,
    OrphanCleanupResponse,
    PendingWagersResponse,
    RemoveGameRequest,
    wager_to_response,
)
from app.services.game_grouper import Game
from app.services.ledger_aggregator import pending_totals
from app.services.wager_service import (
    cleanup_orphans,
    clear_pending,
    delete_pending_at,
    list_games,
    list_pending,
    remove_game,
)

router = APIRouter(prefix="/api/pending-wagers", tags=["pending-wagers"])


def game_to_response(game: Game) -> GameResponse:
    return GameResponse(
        scheme=game.scheme,
        game_id=game.game_id,
        game_key=game.game_key,
        sport=game.sport,
        date=game.date,
        fav=wager_to_response(game.fav),
        dog=wager_to_response(game.dog),
    )


@router.get("", response_model=PendingWagersResponse)
async def get_pending():
    """All stored pending records, including orphans, with totals."""
    wagers = await list_pending()
    totals = pending_totals(wagers)
    return PendingWagersResponse(
        wagers=[wager_to_response(w) for w in wagers],
        total_risked=round(totals["total_risked"], 2),
        total_to_win=round(totals["total_to_win"], 2),
    )


@router.get("/games", response_model=List[GameResponse])
async def get_games():
    """Complete Fav/Dog games that can be settled."""
    return [game_to_response(g) for g in await list_games()]


@router.post("/cleanup", response_model=OrphanCleanupResponse)
async def cleanup():
    """Delete legacy records that have no counterpart."""
    removed, kept = await cleanup_orphans()
    return OrphanCleanupResponse(removed_count=removed, kept_count=kept)


@router.post("/remove-game", response_model=DeleteResponse)
async def remove_whole_game(body: RemoveGameRequest):
    """Drop both sides of a game, e.g. a bet that was never placed."""
    return DeleteResponse(deleted=await remove_game(body))


@router.delete("/{index}", response_model=DeleteResponse)
async def delete_at(index: int):
    await delete_pending_at(index)
    return DeleteResponse(deleted=1)


@router.delete("", response_model=DeleteResponse)
async def delete_all():
    return DeleteResponse(deleted=await clear_pending())
