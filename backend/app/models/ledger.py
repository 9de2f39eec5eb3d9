"""Ledger models - settled outcome entries, deficits and reporting aggregates."""

from enum import Enum
from typing import List, Optional

from pydantic import Field

from app.models.common import CamelModel, doc_id


class OutcomeType(str, Enum):
    win = "win"
    loss = "loss"


# ---------- Settled entries ----------

class SettledEntryResponse(CamelModel):
    """A wager after settlement: original fields plus signed amount.

    ``type`` is the outcome (win/loss), replacing the wager's Fav/Dog side.
    Legacy rows may lack ``amount`` and ``settled_at``.
    """
    id: str
    sport: Optional[str] = None
    team: Optional[str] = None
    type: Optional[str] = None
    risk: Optional[float] = None
    to_win: Optional[float] = None
    date: Optional[str] = None
    game_id: Optional[str] = None
    game_key: Optional[str] = None
    created_at: Optional[str] = None
    amount: Optional[float] = None
    settled_at: Optional[str] = None


class SettlementResponse(CamelModel):
    status: str = "success"
    winners: int
    losers: int
    settled: List[SettledEntryResponse]


class DailyTotalResponse(CamelModel):
    date: str
    total_wagered: float
    total_to_win: float
    net_amount: float
    entries: int


# ---------- Deficits ----------

class DeficitCreate(CamelModel):
    """Manually recorded deficit (e.g. carried over from outside the app)."""
    team: str = Field(min_length=1)
    type: str = Field(min_length=1)
    risk: float = Field(ge=0)
    to_win: float = Field(ge=0)
    deficit: float = Field(ge=0)
    sport: Optional[str] = None
    date: Optional[str] = None
    from_cancellation: bool = False


class DeficitResponse(CamelModel):
    id: str
    team: Optional[str] = None
    type: Optional[str] = None
    risk: Optional[float] = None
    to_win: Optional[float] = None
    deficit: Optional[float] = None
    sport: Optional[str] = None
    date: Optional[str] = None
    settled_at: Optional[str] = None
    from_cancellation: bool = False
    reapply_amount: float = 0.0


class DeficitListResponse(CamelModel):
    deficits: List[DeficitResponse]
    total_deficit: float


class DeleteSelectedRequest(CamelModel):
    settled_at: List[str] = Field(min_length=1)


class DeleteResponse(CamelModel):
    success: bool = True
    deleted: int


# ---------- Reporting ----------

class LedgerSummaryResponse(CamelModel):
    window_hours: int
    rolling_net: float
    settled_count: int
    total_deficit: float
    net_profit: float
    pending_total_risked: float
    pending_total_to_win: float


def settled_to_response(doc: dict) -> SettledEntryResponse:
    data = {k: v for k, v in doc.items() if k != "_id"}
    data["id"] = doc_id(doc)
    return SettledEntryResponse.model_validate(data)


def deficit_to_response(doc: dict, reapply_amount: float) -> DeficitResponse:
    data = {k: v for k, v in doc.items() if k != "_id"}
    data["id"] = doc_id(doc)
    data["from_cancellation"] = bool(doc.get("from_cancellation"))
    data["reapply_amount"] = reapply_amount
    return DeficitResponse.model_validate(data)
