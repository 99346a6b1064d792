"""Pure aggregation over attendance events.

Nothing in here performs I/O or mutates its input. Every function tolerates
malformed events (unparseable timestamp, unknown action): they are skipped,
and ``validate_events`` is the single place that reports them.

Timestamps are compared on their parsed value, never on list position: the
ledger is usually, but not necessarily, ordered by time.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, Iterator, Optional, Sequence, Union

from ..core.constants import (
    ANOMALY_THRESHOLD_HOURS,
    DEFAULT_PEAK_HOURS,
    LOW_ATTENDANCE_MIN_EVENTS,
    MONTHLY_WINDOW_DAYS,
    WEEKLY_WINDOW_DAYS,
)
from ..core.enums import WindowType
from ..core.exceptions import InvalidRecord, InvalidWindow
from ..ledger.model import AttendanceEvent
from .model import ActionCounts, Anomaly, HourCount

logger = logging.getLogger(__name__)

NameResolver = Callable[[int], Optional[str]]


def _check(event: AttendanceEvent) -> datetime:
    at = event.occurred_at
    if not (event.is_sign_in or event.is_sign_out):
        raise InvalidRecord(f"Unknown action {event.action!r}", record_id=event.id)
    return at


def _timed(events: Iterable[AttendanceEvent]) -> Iterator[tuple[AttendanceEvent, datetime]]:
    for event in events:
        try:
            yield event, _check(event)
        except InvalidRecord as e:
            logger.debug("Skipping attendance record %s: %s", e.record_id, e)


def validate_events(events: Iterable[AttendanceEvent]) -> tuple[list[AttendanceEvent], list[InvalidRecord]]:
    """Split events into usable ones and exclusions (one InvalidRecord each)."""
    valid: list[AttendanceEvent] = []
    excluded: list[InvalidRecord] = []
    for event in events:
        try:
            _check(event)
        except InvalidRecord as e:
            excluded.append(e)
            continue
        valid.append(event)

    if excluded:
        logger.warning(
            "Excluded %d malformed attendance record(s) from aggregation (ids: %s)",
            len(excluded),
            ", ".join(str(e.record_id) for e in excluded[:10]),
        )
    return valid, excluded


def coerce_window(window_type: Union[str, WindowType]) -> WindowType:
    try:
        return WindowType(window_type)
    except ValueError:
        allowed = ", ".join(w.value for w in WindowType)
        raise InvalidWindow(f"Invalid report type {window_type!r}; expected one of: {allowed}") from None


def window_bounds(
    window_type: Union[str, WindowType],
    now: datetime,
    *,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> tuple[datetime, datetime]:
    """Inclusive ``(start, end)`` for a window.

    daily   -> the whole calendar day of ``now``
    weekly  -> [now - 7 days, now]
    monthly -> [now - 30 days, now]
    custom  -> [start, end], both required
    """
    window = coerce_window(window_type)

    if window == WindowType.DAILY:
        return datetime.combine(now.date(), time.min), datetime.combine(now.date(), time.max)
    if window == WindowType.WEEKLY:
        return now - timedelta(days=WEEKLY_WINDOW_DAYS), now
    if window == WindowType.MONTHLY:
        return now - timedelta(days=MONTHLY_WINDOW_DAYS), now

    if start is None or end is None:
        raise InvalidWindow("Custom reports require both start and end")
    if start > end:
        raise InvalidWindow("Custom report start must not be after end")
    return start, end


def filter_by_window(
    events: Iterable[AttendanceEvent],
    window_type: Union[str, WindowType],
    now: datetime,
    *,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[AttendanceEvent]:
    """Events inside the window, in their original order."""
    lower, upper = window_bounds(window_type, now, start=start, end=end)
    return [event for event, at in _timed(events) if lower <= at <= upper]


def filter_by_users(events: Iterable[AttendanceEvent], usernames: Optional[Iterable[str]]) -> list[AttendanceEvent]:
    if not usernames:
        return list(events)
    wanted = set(usernames)
    return [e for e in events if e.username in wanted]


def count_actions(events: Iterable[AttendanceEvent]) -> ActionCounts:
    counts = ActionCounts()
    for event, _ in _timed(events):
        counts.add(event)
    return counts


def breakdown_by_hour(events: Iterable[AttendanceEvent]) -> dict[int, int]:
    """Hour of day -> event count. Sparse: hours without events are absent."""
    counts: dict[int, int] = defaultdict(int)
    for _, at in _timed(events):
        counts[at.hour] += 1
    return dict(sorted(counts.items()))


def breakdown_by_day(events: Iterable[AttendanceEvent]) -> dict[str, ActionCounts]:
    """``YYYY-MM-DD`` -> sign-in/sign-out counters, ordered by date."""
    days: dict[str, ActionCounts] = {}
    for event, at in _timed(events):
        days.setdefault(at.date().isoformat(), ActionCounts()).add(event)
    return dict(sorted(days.items()))


def breakdown_by_user(
    events: Iterable[AttendanceEvent],
    resolve_name: Optional[NameResolver] = None,
) -> dict[str, ActionCounts]:
    """Display name -> sign-in/sign-out counters.

    Counting is keyed by ``user_id`` so a renamed user keeps one history. The
    label comes from ``resolve_name`` (current name) when given, otherwise
    from the newest username recorded for that id. Events without a user id
    fall back to their username. Two ids that end up with the same label are
    disambiguated as ``name#id`` instead of being merged.
    """
    counts: dict[object, ActionCounts] = {}
    latest_name: dict[object, tuple[datetime, str]] = {}

    for event, at in _timed(events):
        key: object = event.user_id if event.user_id is not None else ("name", event.username)
        counts.setdefault(key, ActionCounts()).add(event)
        seen = latest_name.get(key)
        if seen is None or at >= seen[0]:
            latest_name[key] = (at, event.username)

    labels: dict[object, str] = {}
    for key in counts:
        label = None
        if resolve_name is not None and isinstance(key, int):
            label = resolve_name(key)
        labels[key] = label or latest_name[key][1]

    usage: dict[str, int] = defaultdict(int)
    for label in labels.values():
        usage[label] += 1

    out: dict[str, ActionCounts] = {}
    for key, value in counts.items():
        label = labels[key]
        if usage[label] > 1 and isinstance(key, int):
            label = f"{label}#{key}"
        out[label] = value
    return out


def peak_hours(hourly: dict[int, int], top_n: int = DEFAULT_PEAK_HOURS) -> list[HourCount]:
    """Top ``top_n`` hours by count; equal counts are ordered by ascending hour."""
    if top_n <= 0:
        return []
    ranked = sorted(hourly.items(), key=lambda item: (-item[1], item[0]))
    return [HourCount(hour=int(hour), count=int(count)) for hour, count in ranked[:top_n]]


def round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def detect_anomalies(
    events: Iterable[AttendanceEvent],
    *,
    threshold_hours: float = ANOMALY_THRESHOLD_HOURS,
) -> list[Anomaly]:
    """Flag sign-ins whose hour is more than ``threshold_hours`` from the mean sign-in hour."""
    sign_ins = [(event, at) for event, at in _timed(events) if event.is_sign_in]
    if not sign_ins:
        return []

    average = sum(at.hour for _, at in sign_ins) / len(sign_ins)
    anomalies = []
    for event, at in sign_ins:
        if abs(at.hour - average) > threshold_hours:
            anomalies.append(
                Anomaly(
                    type="unusual_time",
                    message=f"Unusual sign-in time: {at.hour}:00 (average: {round_half_up(average)}:00)",
                    event=event,
                    hour=at.hour,
                    average_hour=average,
                )
            )
    return anomalies


def detect_user_anomalies(
    events: Iterable[AttendanceEvent],
    user_id: int,
    now: datetime,
    *,
    threshold_hours: float = ANOMALY_THRESHOLD_HOURS,
    min_weekly_events: int = LOW_ATTENDANCE_MIN_EVENTS,
) -> list[Anomaly]:
    """Unusual sign-in times for one user, plus a low-attendance flag for the last week."""
    own = [e for e in events if e.user_id == user_id]
    anomalies = detect_anomalies(own, threshold_hours=threshold_hours)

    last_week = filter_by_window(own, WindowType.WEEKLY, now)
    if len(last_week) < min_weekly_events:
        anomalies.append(
            Anomaly(
                type="low_attendance",
                message=f"Only {len(last_week)} attendance records in the last week",
            )
        )
    return anomalies


def unique_users(events: Iterable[AttendanceEvent]) -> int:
    return len({e.user_id if e.user_id is not None else e.username for e, _ in _timed(events)})


def active_days(events: Iterable[AttendanceEvent]) -> set[date]:
    return {at.date() for _, at in _timed(events)}


def daily_average(events: Sequence[AttendanceEvent]) -> int:
    """Average events per day that had any activity."""
    days = breakdown_by_day(events)
    if not days:
        return 0
    total = sum(c.total for c in days.values())
    return round_half_up(total / len(days))
