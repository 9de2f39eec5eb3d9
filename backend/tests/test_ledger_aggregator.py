from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.services import ledger_aggregator as agg


def test_rolling_net_sums_amounts_in_window():
    settled = [{"date": "2024-01-01", "amount": 50}]
    assert agg.rolling_net(24, settled, [], now=datetime(2024, 1, 1, 12)) == 50


def test_rolling_net_excludes_old_and_undated_entries():
    settled = [
        {"date": "2024-01-01", "amount": 50},
        {"date": "2023-12-30", "amount": 100},
        {"amount": 7},
        {"date": "not a date", "amount": 9},
    ]
    assert agg.rolling_net(24, settled, [], now=datetime(2024, 1, 1, 12)) == 50


def test_rolling_net_window_is_strict():
    settled = [{"date": "2024-01-01", "amount": 5}]
    assert agg.rolling_net(24, settled, [], now=datetime(2024, 1, 2, 0, 0)) == 0


def test_amount_mode_ignores_deficits():
    settled = [{"date": "2024-01-01", "amount": 8}, {"date": "2024-01-01", "amount": -8}]
    deficits = [{"date": "2024-01-01", "deficit": 8}]
    assert agg.rolling_net(24, settled, deficits, now=datetime(2024, 1, 1, 12)) == 0


def test_legacy_mode_is_to_win_minus_deficits():
    settled = [{"date": "2024-01-01", "to_win": 30}, {"date": "2024-01-01", "to_win": 5}]
    deficits = [
        {"date": "2024-01-01", "deficit": 12},
        {"date": "2023-06-01", "deficit": 1000},
    ]
    assert agg.rolling_net(24, settled, deficits, now=datetime(2024, 1, 1, 12)) == 23


def test_settled_count_in_window():
    settled = [{"date": "2024-01-01"}, {"date": "2024-01-01"}, {"date": "2023-01-01"}]
    assert agg.settled_count_in_window(24, settled, now=datetime(2024, 1, 1, 6)) == 2


def test_daily_totals_groups_by_settlement_day():
    settled = [
        {"risk": 10, "to_win": 8, "amount": 8, "settled_at": "2024-01-01T22:00:00.000000+00:00"},
        {"risk": 8, "to_win": 10, "amount": -8, "settled_at": "2024-01-01T22:00:00.000000+00:00"},
        {"risk": 5, "to_win": 5, "amount": 5, "date": "2024-01-03"},
    ]
    days = agg.daily_totals(settled)

    assert [d["date"] for d in days] == ["2024-01-01", "2024-01-03"]
    assert days[0]["total_wagered"] == 18
    assert days[0]["net_amount"] == 0
    assert days[0]["entries"] == 2
    assert days[1]["total_to_win"] == 5


def test_reapply_amount_by_origin():
    assert agg.reapply_amount({"risk": 10, "to_win": 8, "from_cancellation": False}) == 18
    assert agg.reapply_amount({"risk": 10, "to_win": 8, "from_cancellation": True}) == 8


def test_sort_for_reapply_is_stable_descending():
    deficits = [
        {"team": "a", "risk": 1, "to_win": 1},
        {"team": "b", "risk": 5, "to_win": 5},
        {"team": "c", "risk": 2, "to_win": 0},
    ]
    assert [d["team"] for d in agg.sort_for_reapply(deficits)] == ["b", "a", "c"]


def test_pending_totals_treat_missing_as_zero():
    totals = agg.pending_totals([{"risk": 10, "to_win": 8}, {"risk": None}])
    assert totals == {"total_risked": 10, "total_to_win": 8}


def test_any_amount_in_data_set_selects_amount_mode():
    settled = [
        {"date": "2023-12-01", "amount": 50},
        {"date": "2024-01-01", "to_win": 30},
    ]
    assert agg.rolling_net(24, settled, [], now=datetime(2024, 1, 1, 12)) == 0


def test_date_with_time_component_is_parsed_as_given():
    settled = [
        {"date": "2024-01-01T13:00:00", "amount": 10},
        {"date": "2024-01-01", "amount": 100},
    ]
    assert agg.rolling_net(24, settled, [], now=datetime(2024, 1, 2, 12, 30)) == 10
    assert agg.rolling_net(24, settled, [], now=datetime(2024, 1, 2, 13, 0)) == 0


def test_utc_datetime_dates_compare_against_aware_now():
    settled = [{"date": "2024-01-01T13:00:00Z", "amount": 7}]
    now = datetime(2024, 1, 2, 12, 59, tzinfo=timezone.utc)
    assert agg.rolling_net(24, settled, [], now=now) == 7
    assert agg.rolling_net(24, settled, [], now=now + timedelta(minutes=1)) == 0
