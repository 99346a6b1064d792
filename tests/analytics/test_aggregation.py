from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.attendance_tracker.attendance_tracker.analytics import aggregation as agg
from src.attendance_tracker.attendance_tracker.core.exceptions import InvalidWindow
from src.attendance_tracker.attendance_tracker.ledger.model import AttendanceEvent


def ev(event_id: int, at, user_id: int = 1, username: str = "u1", action: str = "sign-in") -> AttendanceEvent:
    timestamp = at.isoformat() if isinstance(at, datetime) else at
    return AttendanceEvent(id=event_id, user_id=user_id, username=username, action=action, timestamp=timestamp)


@pytest.fixture
def today_events(fixed_now):
    day = fixed_now.replace(hour=9, minute=0)
    return [
        ev(1, day, 1, "u1", "sign-in"),
        ev(2, day + timedelta(minutes=5), 1, "u1", "sign-out"),
        ev(3, day + timedelta(minutes=10), 2, "u2", "sign-in"),
    ]


def test_breakdowns_for_a_morning(today_events):
    by_user = agg.breakdown_by_user(today_events)

    assert agg.breakdown_by_hour(today_events) == {9: 3}
    assert {name: c.to_dict() for name, c in by_user.items()} == {
        "u1": {"signIns": 1, "signOuts": 1},
        "u2": {"signIns": 1, "signOuts": 0},
    }


def test_weekly_window_boundaries(fixed_now):
    seven = ev(1, fixed_now - timedelta(days=7))
    eight = ev(2, fixed_now - timedelta(days=8))
    at_now = ev(3, fixed_now)
    later = ev(4, fixed_now + timedelta(seconds=1))

    result = agg.filter_by_window([eight, seven, at_now, later], "weekly", fixed_now)

    assert result == [seven, at_now]


def test_monthly_window_uses_thirty_days(fixed_now):
    inside = ev(1, fixed_now - timedelta(days=30))
    outside = ev(2, fixed_now - timedelta(days=30, seconds=1))

    assert agg.filter_by_window([inside, outside], "monthly", fixed_now) == [inside]


def test_daily_window_is_the_calendar_day(fixed_now):
    midnight = ev(1, fixed_now.replace(hour=0, minute=0))
    late = ev(2, fixed_now.replace(hour=23, minute=59))
    yesterday = ev(3, fixed_now.replace(hour=0, minute=0) - timedelta(seconds=1))

    assert agg.filter_by_window([midnight, late, yesterday], "daily", fixed_now) == [midnight, late]


def test_window_filter_does_not_rely_on_order(fixed_now):
    events = [ev(1, fixed_now - timedelta(days=1)), ev(2, fixed_now - timedelta(days=20)), ev(3, fixed_now - timedelta(days=2))]

    assert [e.id for e in agg.filter_by_window(events, "weekly", fixed_now)] == [1, 3]


@pytest.mark.parametrize("window", ["daily", "weekly", "monthly"])
def test_window_filter_is_idempotent(fixed_now, window):
    events = [ev(i, fixed_now - timedelta(hours=13 * i)) for i in range(80)]

    once = agg.filter_by_window(events, window, fixed_now)
    twice = agg.filter_by_window(once, window, fixed_now)

    assert once == twice


def test_custom_window_needs_both_bounds(fixed_now):
    start = fixed_now - timedelta(days=3)
    events = [ev(1, start), ev(2, fixed_now), ev(3, start - timedelta(seconds=1))]

    assert agg.filter_by_window(events, "custom", fixed_now, start=start, end=fixed_now) == events[:2]
    with pytest.raises(InvalidWindow):
        agg.filter_by_window(events, "custom", fixed_now, start=start)
    with pytest.raises(InvalidWindow):
        agg.filter_by_window(events, "custom", fixed_now, start=fixed_now, end=start)


@pytest.mark.parametrize("window", ["yearly", "", None, "Daily"])
def test_unknown_window_is_rejected(fixed_now, window):
    with pytest.raises(InvalidWindow):
        agg.filter_by_window([], window, fixed_now)


def test_day_counts_sum_to_event_count(fixed_now):
    events = [
        ev(i, fixed_now - timedelta(hours=7 * i), action="sign-in" if i % 3 else "sign-out")
        for i in range(50)
    ]

    days = agg.breakdown_by_day(events)

    assert sum(c.sign_ins + c.sign_outs for c in days.values()) == len(events)
    assert list(days) == sorted(days)


def test_peak_hours_is_top_k_with_ascending_hour_ties():
    hourly = {8: 4, 9: 7, 12: 4, 17: 2, 7: 4}

    peaks = agg.peak_hours(hourly, 3)

    assert [(p.hour, p.count) for p in peaks] == [(9, 7), (7, 4), (8, 4)]
    unreturned = {h: c for h, c in hourly.items() if h not in {p.hour for p in peaks}}
    assert min(p.count for p in peaks) >= max(unreturned.values())
    assert agg.peak_hours(hourly, 0) == []
    assert len(agg.peak_hours(hourly, 10)) == len(hourly)


def test_anomaly_flags_only_the_outlier(fixed_now):
    day = fixed_now.date()
    hours = [9, 9, 9, 9, 2]
    events = [ev(i, datetime.combine(day, datetime.min.time()).replace(hour=h), user_id=i) for i, h in enumerate(hours)]
    events.append(ev(99, fixed_now.replace(hour=23), action="sign-out"))

    anomalies = agg.detect_anomalies(events)

    assert len(anomalies) == 1
    assert anomalies[0].event.id == 4
    assert anomalies[0].hour == 2
    assert anomalies[0].message == "Unusual sign-in time: 2:00 (average: 8:00)"


def test_no_sign_ins_means_no_anomalies(fixed_now):
    assert agg.detect_anomalies([ev(1, fixed_now, action="sign-out")]) == []


def test_user_anomalies_flag_low_attendance(fixed_now):
    events = [ev(i, fixed_now - timedelta(days=i), user_id=1) for i in range(3)]
    events.append(ev(10, fixed_now, user_id=2, username="u2"))

    anomalies = agg.detect_user_anomalies(events, 1, fixed_now)

    assert [a.type for a in anomalies] == ["low_attendance"]
    assert anomalies[0].message == "Only 3 attendance records in the last week"


def test_one_malformed_record_in_a_hundred(fixed_now):
    events = [ev(i, fixed_now - timedelta(minutes=i), user_id=i % 4) for i in range(99)]
    events.insert(42, ev(1000, "not-a-date"))

    valid, excluded = agg.validate_events(events)

    assert len(valid) == 99
    assert len(excluded) == 1
    assert excluded[0].record_id == 1000
    assert sum(agg.breakdown_by_hour(events).values()) == 99
    assert len(agg.filter_by_window(events, "daily", fixed_now)) == 99


def test_unknown_action_is_excluded(fixed_now):
    _, excluded = agg.validate_events([ev(1, fixed_now, action="lunch")])

    assert excluded[0].record_id == 1


def test_renamed_user_keeps_one_history(fixed_now):
    events = [
        ev(1, fixed_now - timedelta(days=2), 5, "jdoe"),
        ev(2, fixed_now - timedelta(days=1), 5, "john.doe", "sign-out"),
    ]

    by_user = agg.breakdown_by_user(events)

    assert list(by_user) == ["john.doe"]
    assert by_user["john.doe"].total == 2


def test_user_labels_come_from_resolver_and_never_merge(fixed_now):
    events = [ev(1, fixed_now, 1, "sam"), ev(2, fixed_now, 2, "sam")]

    by_user = agg.breakdown_by_user(events, lambda user_id: {1: "sam"}.get(user_id))

    assert sorted(by_user) == ["sam#1", "sam#2"]


def test_input_is_not_mutated(today_events):
    before = list(today_events)

    agg.breakdown_by_day(today_events)
    agg.detect_anomalies(today_events)

    assert today_events == before


def test_daily_average_and_unique_users(today_events, fixed_now):
    events = today_events + [ev(4, fixed_now - timedelta(days=1), 3, "u3")]

    assert agg.unique_users(events) == 3
    assert agg.daily_average(events) == 2
    assert agg.daily_average([]) == 0
