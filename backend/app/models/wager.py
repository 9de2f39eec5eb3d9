"""Wager and game models - pending Fav/Dog pairs and the requests acting on them."""

from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from app.models.common import CamelModel, doc_id
from app.utils import parse_wager_date


class WagerSide(str, Enum):
    fav = "Fav"
    dog = "Dog"


class GroupingScheme(str, Enum):
    game_id = "game_id"      # Shared server-generated gameId
    game_key = "game_key"    # Shared client-supplied gameKey
    legacy = "legacy"        # Positional sport+date pairing, no identifier


# ---------- Request models ----------

class WagerCreate(CamelModel):
    """One side of a submitted game. ``gameId`` is always assigned server-side."""
    sport: str = Field(min_length=1)
    team: str = Field(min_length=1)
    type: WagerSide
    risk: float = Field(ge=0)
    to_win: float = Field(ge=0)
    date: str
    game_key: Optional[str] = None

    @field_validator("sport", "team")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("date")
    @classmethod
    def _valid_date(cls, v: str) -> str:
        parse_wager_date(v)
        return v.strip()


class SubmitGameRequest(CamelModel):
    """Both sides of one game, submitted together."""
    fav_wager: WagerCreate
    dog_wager: WagerCreate

    @model_validator(mode="after")
    def _check_pair(self):
        if self.fav_wager.type != WagerSide.fav:
            raise ValueError("favWager must have type 'Fav'")
        if self.dog_wager.type != WagerSide.dog:
            raise ValueError("dogWager must have type 'Dog'")
        if self.fav_wager.sport != self.dog_wager.sport:
            raise ValueError("favWager and dogWager must share the same sport")
        if self.fav_wager.date != self.dog_wager.date:
            raise ValueError("favWager and dogWager must share the same date")
        if (self.fav_wager.game_key or None) != (self.dog_wager.game_key or None):
            raise ValueError("favWager and dogWager must share the same gameKey")
        return self


class WinnerRef(CamelModel):
    team: str = Field(min_length=1)


class SettleGameRequest(CamelModel):
    """Settlement criteria. Exactly one identifier scheme is used, in priority
    order gameId > gameKey > sport/date/teams."""
    winner: WinnerRef
    game_id: Optional[str] = None
    game_key: Optional[str] = None
    sport: Optional[str] = None
    date: Optional[str] = None
    teams: Optional[List[Optional[str]]] = None


class CancelWagerRequest(CamelModel):
    """Void one pending side. ``team`` plus one of gameId / gameKey / sport+date."""
    team: str = Field(min_length=1)
    game_id: Optional[str] = None
    game_key: Optional[str] = None
    sport: Optional[str] = None
    date: Optional[str] = None


class RemoveGameRequest(CamelModel):
    """Drop a whole game from pending without settling it. Same criteria as settle."""
    game_id: Optional[str] = None
    game_key: Optional[str] = None
    sport: Optional[str] = None
    date: Optional[str] = None
    teams: Optional[List[Optional[str]]] = None


# ---------- Response models ----------

class WagerResponse(CamelModel):
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


class GameResponse(CamelModel):
    scheme: GroupingScheme
    game_id: Optional[str] = None
    game_key: Optional[str] = None
    sport: Optional[str] = None
    date: Optional[str] = None
    fav: WagerResponse
    dog: WagerResponse


class SubmitGameResponse(CamelModel):
    status: str = "success"
    game_id: str
    saved: List[WagerResponse]


class PendingWagersResponse(CamelModel):
    wagers: List[WagerResponse]
    total_risked: float
    total_to_win: float


class OrphanCleanupResponse(CamelModel):
    removed_count: int
    kept_count: int


def wager_to_response(doc: dict) -> WagerResponse:
    data = {k: v for k, v in doc.items() if k != "_id"}
    data["id"] = doc_id(doc)
    return WagerResponse.model_validate(data)
