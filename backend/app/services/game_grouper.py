"""
backend/app/services/game_grouper.py

Purpose:
    Partition the pending collection into logical two-sided games. Records are
    grouped by shared gameId, then shared gameKey, then (legacy records
    with neither identifier) by left-to-right positional pairing on
    sport+date with opposite sides. Incomplete groups are never actionable.

Dependencies:
    - dataclasses
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from app.models.wager import GroupingScheme, WagerSide

_SIDES = {WagerSide.fav.value, WagerSide.dog.value}


@dataclass
class Game:
    fav: dict
    dog: dict
    scheme: GroupingScheme

    @property
    def records(self) -> list[dict]:
        return [self.fav, self.dog]

    @property
    def sport(self) -> str | None:
        return self.fav.get("sport") or self.dog.get("sport")

    @property
    def date(self) -> str | None:
        return self.fav.get("date") or self.dog.get("date")

    @property
    def game_id(self) -> str | None:
        return self.fav.get("game_id")

    @property
    def game_key(self) -> str | None:
        return self.fav.get("game_key")


@dataclass
class OrphanCleanup:
    kept: list[dict]
    removed: list[dict] = field(default_factory=list)

    @property
    def removed_count(self) -> int:
        return len(self.removed)


def _is_identified(wager: dict) -> bool:
    return bool(wager.get("game_id")) or bool(wager.get("game_key"))


def _as_game(a: dict, b: dict, scheme: GroupingScheme) -> Game:
    if a.get("type") == WagerSide.fav.value:
        return Game(fav=a, dog=b, scheme=scheme)
    return Game(fav=b, dog=a, scheme=scheme)


def _complete_buckets(wagers: Iterable[dict], key: str, scheme: GroupingScheme) -> list[Game]:
    buckets: dict[str, list[dict]] = {}
    for wager in wagers:
        buckets.setdefault(wager[key], []).append(wager)

    games: list[Game] = []
    for bucket in buckets.values():
        if len(bucket) != 2:
            continue
        if {w.get("type") for w in bucket} != _SIDES:
            continue
        games.append(_as_game(bucket[0], bucket[1], scheme))
    return games


def _pairs_with(first: dict, other: dict) -> bool:
    return (
        other.get("sport") == first.get("sport")
        and other.get("date") == first.get("date")
        and {first.get("type"), other.get("type")} == _SIDES
    )


def pair_legacy(wagers: list[dict]) -> tuple[list[Game], list[dict]]:
    """First-eligible-match pairing. Returns (games, orphans), both in input order."""
    consumed = [False] * len(wagers)
    games: list[Game] = []
    for i, first in enumerate(wagers):
        if consumed[i]:
            continue
        for j in range(i + 1, len(wagers)):
            if consumed[j] or not _pairs_with(first, wagers[j]):
                continue
            consumed[i] = consumed[j] = True
            games.append(_as_game(first, wagers[j], GroupingScheme.legacy))
            break
    orphans = [w for i, w in enumerate(wagers) if not consumed[i]]
    return games, orphans


def group_games(wagers: list[dict]) -> list[Game]:
    """Complete games only: gameId groups, then gameKey groups, then legacy pairs."""
    by_id = [w for w in wagers if w.get("game_id")]
    by_key = [w for w in wagers if not w.get("game_id") and w.get("game_key")]
    legacy = [w for w in wagers if not _is_identified(w)]

    games = _complete_buckets(by_id, "game_id", GroupingScheme.game_id)
    games += _complete_buckets(by_key, "game_key", GroupingScheme.game_key)
    legacy_games, _ = pair_legacy(legacy)
    games += legacy_games
    return games


def remove_orphans(wagers: list[dict]) -> OrphanCleanup:
    """Split pending wagers into kept records and unpaired legacy records.

    Records carrying a gameId or gameKey are always kept, even when their
    counterpart is missing.
    """
    legacy = [w for w in wagers if not _is_identified(w)]
    _, orphans = pair_legacy(legacy)
    orphan_ids = {id(w) for w in orphans}
    kept = [w for w in wagers if id(w) not in orphan_ids]
    return OrphanCleanup(kept=kept, removed=orphans)
