"""Settled wagers API - immutable outcome entries."""

from typing import List

from fastapi import APIRouter

from app.models.ledger import DailyTotalResponse, DeleteResponse, SettledEntryResponse, settled_to_response
from app.services.ledger_aggregator import daily_totals
from app.services.settlement_service import list_settled, reset_settled

router = APIRouter(prefix="/api/settled-wagers", tags=["settled-wagers"])


@router.get("", response_model=List[SettledEntryResponse])
async def get_settled():
    return [settled_to_response(e) for e in await list_settled()]


@router.get("/daily-totals", response_model=List[DailyTotalResponse])
async def get_daily_totals():
    """Totals per calendar day for the settled calendar view."""
    return [DailyTotalResponse(**row) for row in daily_totals(await list_settled())]


@router.delete("", response_model=DeleteResponse)
async def reset():
    return DeleteResponse(deleted=await reset_settled())
