"""
backend/app/services/wager_matcher.py

Purpose:
    Locate the exact pending records of one game for a settlement request.
    The identifier fallback chain is resolved once per request into a tagged
    criteria value (ById | ByKey | ByHeuristic); the schemes are never combined.

Dependencies:
    - dataclasses
    - app.services.ledger_errors
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from app.services.ledger_errors import NotFoundError, ValidationError


@dataclass(frozen=True)
class ById:
    game_id: str


@dataclass(frozen=True)
class ByKey:
    game_key: str


@dataclass(frozen=True)
class ByHeuristic:
    sport: str
    date: str
    teams: tuple[str, str]


MatchCriteria = Union[ById, ByKey, ByHeuristic]


@dataclass
class MatchedGame:
    criteria: MatchCriteria
    records: list[dict]

    def removal_query(self) -> dict:
        """Predicate that deletes exactly the matched records.

        Positional matches delete by stored identity, never by re-scanning
        field values, so an unrelated duplicate stays pending.
        """
        if isinstance(self.criteria, ById):
            return {"game_id": self.criteria.game_id}
        if isinstance(self.criteria, ByKey):
            return {"game_key": self.criteria.game_key}
        return {"_id": {"$in": [r["_id"] for r in self.records]}}


def team_name(value) -> str:
    return (value or "").strip()


def resolve_criteria(
    *,
    game_id: str | None = None,
    game_key: str | None = None,
    sport: str | None = None,
    date: str | None = None,
    teams: Sequence[str | None] | None = None,
) -> MatchCriteria:
    if game_id:
        return ById(game_id)
    if game_key:
        return ByKey(game_key)
    if sport and date and teams:
        trimmed = [team_name(t) for t in teams]
        if len(trimmed) != 2 or not all(trimmed):
            raise ValidationError("teams must list exactly two team names.")
        return ByHeuristic(sport=sport, date=date, teams=(trimmed[0], trimmed[1]))
    raise ValidationError("Missing gameId, gameKey or sport/date/teams.")


def _match_heuristic(criteria: ByHeuristic, pending: list[dict]) -> list[dict]:
    picked: set[int] = set()
    claimed_types: set[str | None] = set()
    records: list[dict] = []
    for team in criteria.teams:
        for idx, wager in enumerate(pending):
            if idx in picked:
                continue
            if wager.get("sport") != criteria.sport or wager.get("date") != criteria.date:
                continue
            if team_name(wager.get("team")) != team:
                continue
            if wager.get("type") in claimed_types:
                continue
            picked.add(idx)
            claimed_types.add(wager.get("type"))
            records.append(wager)
            break
    return records


def match_game(criteria: MatchCriteria, pending: list[dict]) -> MatchedGame:
    """Select the pending records of one game. Raises NotFoundError below two."""
    if isinstance(criteria, ById):
        records = [w for w in pending if w.get("game_id") == criteria.game_id]
    elif isinstance(criteria, ByKey):
        records = [w for w in pending if w.get("game_key") == criteria.game_key]
    else:
        records = _match_heuristic(criteria, pending)

    if len(records) < 2:
        raise NotFoundError("No matching game: need both a winner and a loser wager.")
    return MatchedGame(criteria=criteria, records=records)
