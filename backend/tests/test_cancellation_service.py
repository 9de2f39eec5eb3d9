from __future__ import annotations

from datetime import datetime, timezone

import pytest
from conftest import wager

from app.models.wager import CancelWagerRequest
from app.services import cancellation_service
from app.services.ledger_aggregator import reapply_amount
from app.services.ledger_errors import NotFoundError, ValidationError

_NOW = datetime(2024, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_cancel_credits_to_win_not_risk(ledger_db):
    ledger_db.pending_wagers.seed(wager("Knicks", "Fav", risk=12, to_win=7, game_id="g7"))
    dog = ledger_db.pending_wagers.seed(wager("Nets", "Dog", risk=7, to_win=12, game_id="g7"))

    deficit = await cancellation_service.cancel_wager(
        CancelWagerRequest(team="Knicks", gameId="g7"), now=_NOW,
    )

    assert deficit["deficit"] == 7.0
    assert deficit["from_cancellation"] is True
    assert deficit["settled_at"] == "2024-03-02T09:00:00.000000+00:00"
    assert [d["_id"] for d in ledger_db.pending_wagers.docs] == [dog["_id"]]
    assert len(ledger_db.deficits.docs) == 1
    assert ledger_db.settled_entries.docs == []
    assert reapply_amount(deficit) == 7.0


@pytest.mark.asyncio
async def test_cancel_by_sport_and_date_removes_first_match_only(ledger_db):
    first = ledger_db.pending_wagers.seed(wager("Jets", "Dog", sport="NFL", date="2024-09-08"))
    second = ledger_db.pending_wagers.seed(wager("Jets", "Dog", sport="NFL", date="2024-09-08"))

    await cancellation_service.cancel_wager(
        CancelWagerRequest(team=" Jets ", sport="NFL", date="2024-09-08"), now=_NOW,
    )

    assert [d["_id"] for d in ledger_db.pending_wagers.docs] == [second["_id"]]
    assert first["_id"] not in [d["_id"] for d in ledger_db.pending_wagers.docs]


@pytest.mark.asyncio
async def test_cancel_unknown_team_is_not_found(ledger_db):
    ledger_db.pending_wagers.seed(wager("Jets", "Dog", game_key="k1"))

    with pytest.raises(NotFoundError):
        await cancellation_service.cancel_wager(CancelWagerRequest(team="Giants", gameKey="k1"))
    assert len(ledger_db.pending_wagers.docs) == 1
    assert ledger_db.deficits.docs == []


@pytest.mark.asyncio
async def test_cancel_without_game_reference_is_validation_error(ledger_db):
    with pytest.raises(ValidationError):
        await cancellation_service.cancel_wager(CancelWagerRequest(team="Jets", sport="NFL"))


def test_locate_wager_prefers_game_id_over_other_fields():
    pending = [
        wager("Jets", "Dog", game_id="a", _id=1),
        wager("Jets", "Dog", game_id="b", _id=2),
    ]
    found = cancellation_service.locate_wager(
        CancelWagerRequest(team="Jets", gameId="b", sport="NBA", date="2024-01-01"), pending,
    )
    assert found["_id"] == 2


@pytest.mark.asyncio
async def test_cancel_by_game_key(ledger_db):
    fav = ledger_db.pending_wagers.seed(wager("Cubs", "Fav", sport="MLB", risk=15, to_win=10, game_key="mlb-1"))
    ledger_db.pending_wagers.seed(wager("Mets", "Dog", sport="MLB", risk=10, to_win=15, game_key="mlb-1"))

    deficit = await cancellation_service.cancel_wager(
        CancelWagerRequest(team="Mets", gameKey="mlb-1"), now=_NOW,
    )

    assert deficit["team"] == "Mets"
    assert deficit["deficit"] == 15.0
    assert [d["_id"] for d in ledger_db.pending_wagers.docs] == [fav["_id"]]
    assert ledger_db.deficits.docs[0]["from_cancellation"] is True
