"""Games API - submit a Fav/Dog pair, settle it, or cancel one side."""

from fastapi import APIRouter, status

from app.models.ledger import DeficitResponse, SettlementResponse, deficit_to_response, settled_to_response
from app.models.wager import (
    CancelWagerRequest,
    SettleGameRequest,
    SubmitGameRequest,
    SubmitGameResponse,
    wager_to_response,
)
from app.services.cancellation_service import cancel_wager
from app.services.ledger_aggregator import reapply_amount
from app.services.settlement_service import settle_game
from app.services.wager_service import submit_game

router = APIRouter(prefix="/api/games", tags=["games"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SubmitGameResponse)
async def submit(body: SubmitGameRequest):
    """Store both sides of a game under a new gameId."""
    game_id, docs = await submit_game(body)
    return SubmitGameResponse(game_id=game_id, saved=[wager_to_response(d) for d in docs])


@router.post("/settle", response_model=SettlementResponse)
async def settle(body: SettleGameRequest):
    """Declare the winner of a pending game."""
    result = await settle_game(body)
    return SettlementResponse(
        winners=result.winners,
        losers=result.losers,
        settled=[settled_to_response(e) for e in result.settled],
    )


@router.post("/cancel", response_model=DeficitResponse)
async def cancel(body: CancelWagerRequest):
    """Void one pending side; its to-win is credited as a deficit."""
    deficit = await cancel_wager(body)
    return deficit_to_response(deficit, reapply_amount(deficit))
