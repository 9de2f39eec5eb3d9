"""Ledger reporting API - rolling net summary and configured sports."""

from typing import Optional

from fastapi import APIRouter, Query

from app.config import settings
from app.models.ledger import LedgerSummaryResponse
from app.services.ledger_aggregator import load_ledger_summary

router = APIRouter(prefix="/api", tags=["ledger"])


@router.get("/sports")
async def get_sports():
    return {"sports": settings.sports}


@router.get("/ledger/summary", response_model=LedgerSummaryResponse)
async def get_summary(window_hours: Optional[int] = Query(None, alias="windowHours", ge=1, le=24 * 365)):
    """Rolling net, settled count and outstanding deficits."""
    return LedgerSummaryResponse(**await load_ledger_summary(window_hours=window_hours))
