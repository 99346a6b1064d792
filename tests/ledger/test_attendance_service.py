from __future__ import annotations

import dataclasses
from datetime import datetime

import pytest

from src.attendance_tracker.attendance_tracker.core.exceptions import InvalidAction, StorageUnavailable
from src.attendance_tracker.attendance_tracker.ledger.model import AttendanceEvent
from src.attendance_tracker.attendance_tracker.ledger.service import AttendanceService


class InMemoryEvents:
    def __init__(self):
        self.events: list[AttendanceEvent] = []

    def append(self, event: AttendanceEvent) -> AttendanceEvent:
        stored = dataclasses.replace(
            event,
            id=len(self.events) + 1,
            timestamp=event.timestamp or "2024-01-15T08:00:00.000",
        )
        self.events.append(stored)
        return stored

    def fetch_all(self):
        return list(self.events)


class RecordingActivity:
    def __init__(self, fail: bool = False):
        self.calls = []
        self._fail = fail

    def log_activity(self, type: str, description: str, **kwargs):
        if self._fail:
            raise StorageUnavailable("logs down")
        self.calls.append((type, description, kwargs))


def test_record_event_appends_and_logs(fixed_now):
    events = InMemoryEvents()
    activity = RecordingActivity()
    svc = AttendanceService(events, activity)

    stored = svc.record_event(1, "alice", "sign-in", ip_address="10.0.0.1", now=fixed_now)

    assert stored.id == 1
    assert stored.timestamp == "2024-01-15T12:00:00.000"
    assert stored.location == "Office"
    assert events.events == [stored]
    assert activity.calls[0][0] == "attendance"
    assert activity.calls[0][1] == "alice sign-in"
    assert activity.calls[0][2]["ip_address"] == "10.0.0.1"


def test_record_event_keeps_given_location(fixed_now):
    svc = AttendanceService(InMemoryEvents())

    stored = svc.record_event(1, "alice", "sign-out", location=" Remote ", now=fixed_now)

    assert stored.location == "Remote"
    assert stored.is_sign_out


@pytest.mark.parametrize("action", ["signin", "SIGN-IN", "", "lunch"])
def test_record_event_rejects_unknown_action(action):
    events = InMemoryEvents()
    svc = AttendanceService(events)

    with pytest.raises(InvalidAction):
        svc.record_event(1, "alice", action)

    assert events.events == []


def test_activity_failure_does_not_undo_the_event(fixed_now):
    events = InMemoryEvents()
    svc = AttendanceService(events, RecordingActivity(fail=True))

    stored = svc.record_event(1, "alice", "sign-in", now=fixed_now)

    assert events.events == [stored]


def test_list_events_filters_by_user_and_keeps_latest():
    svc = AttendanceService(InMemoryEvents())
    for i, (uid, action) in enumerate([(1, "sign-in"), (2, "sign-in"), (1, "sign-out"), (2, "sign-out")]):
        svc.record_event(uid, f"user{uid}", action, now=datetime(2024, 1, 15, 9, i))

    assert [e.id for e in svc.list_events(user_id=1)] == [1, 3]
    assert [e.id for e in svc.list_events(limit=2)] == [3, 4]
    assert svc.list_events(limit=0) == []
