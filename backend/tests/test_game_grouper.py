"""
backend/tests/test_game_grouper.py

Purpose:
    Grouping of pending wagers into complete Fav/Dog games and orphan cleanup.
"""

from __future__ import annotations

from conftest import wager

from app.models.wager import GroupingScheme
from app.services.game_grouper import group_games, pair_legacy, remove_orphans


def test_incomplete_game_id_bucket_is_excluded():
    wagers = [
        wager("Lakers", "Fav", game_id="g1"),
        wager("Celtics", "Dog", game_id="g1"),
        wager("Knicks", "Fav", game_id="g2"),
    ]

    games = group_games(wagers)

    assert len(games) == 1
    assert games[0].game_id == "g1"
    assert games[0].scheme == GroupingScheme.game_id
    assert games[0].fav["team"] == "Lakers"
    assert games[0].dog["team"] == "Celtics"


def test_game_id_bucket_with_two_favs_is_not_a_game():
    wagers = [
        wager("Lakers", "Fav", game_id="g1"),
        wager("Celtics", "Fav", game_id="g1"),
    ]
    assert group_games(wagers) == []


def test_dog_listed_first_still_lands_on_dog_side():
    games = group_games([
        wager("Celtics", "Dog", game_id="g1"),
        wager("Lakers", "Fav", game_id="g1"),
    ])
    assert games[0].fav["team"] == "Lakers"
    assert games[0].dog["team"] == "Celtics"


def test_game_key_groups_records_without_game_id():
    games = group_games([
        wager("Lakers", "Fav", game_key="NBA:Lakers|Celtics"),
        wager("Heat", "Fav"),
        wager("Celtics", "Dog", game_key="NBA:Lakers|Celtics"),
    ])
    assert len(games) == 1
    assert games[0].scheme == GroupingScheme.game_key
    assert games[0].game_key == "NBA:Lakers|Celtics"


def test_legacy_pairs_first_eligible_partner():
    legacy = [
        wager("A", "Fav"),
        wager("B", "Fav"),
        wager("C", "Dog", date="2024-01-02"),
        wager("D", "Dog"),
        wager("E", "Dog"),
    ]

    games, orphans = pair_legacy(legacy)

    assert [(g.fav["team"], g.dog["team"]) for g in games] == [("A", "D"), ("B", "E")]
    assert [o["team"] for o in orphans] == ["C"]


def test_legacy_requires_same_sport():
    games, orphans = pair_legacy([wager("A", "Fav", sport="NHL"), wager("B", "Dog", sport="NBA")])
    assert games == []
    assert len(orphans) == 2


def test_identified_games_come_before_legacy_pairs():
    games = group_games([
        wager("A", "Fav"),
        wager("B", "Dog"),
        wager("X", "Fav", game_id="g9"),
        wager("Y", "Dog", game_id="g9"),
    ])
    assert [g.scheme for g in games] == [GroupingScheme.game_id, GroupingScheme.legacy]


def test_remove_orphans_keeps_identified_singletons():
    wagers = [
        wager("A", "Fav"),
        wager("Lonely", "Fav", game_id="g1"),
        wager("B", "Dog"),
        wager("C", "Fav"),
    ]

    cleanup = remove_orphans(wagers)

    assert cleanup.removed_count == 1
    assert cleanup.removed[0]["team"] == "C"
    assert [w["team"] for w in cleanup.kept] == ["A", "Lonely", "B"]
