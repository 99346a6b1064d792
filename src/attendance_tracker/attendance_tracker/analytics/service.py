from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Sequence, Union

from ..common.datetime_utils import now_local, parse_timestamp
from ..core.constants import (
    ANOMALY_THRESHOLD_HOURS,
    DEFAULT_EXPECTED_USER_COUNT,
    DEFAULT_PEAK_HOURS,
    DEFAULT_TREND_DAYS,
    MAX_PEAK_HOURS,
    MAX_TREND_DAYS,
    WEEKLY_WINDOW_DAYS,
)
from ..core.enums import AnalyticsKind, WindowType
from ..core.exceptions import InvalidWindow, UnknownAnalyticsKind, ValidationError
from ..ledger.model import AttendanceEvent
from ..ledger.repository import EventStore
from ..users.repository import UserRepository
from . import aggregation as agg
from .cache import AnalyticsCache
from .model import Anomaly, AnalyticsSnapshot, ReportWindow
from .scoring.base import ScoreCalculator
from .scoring.standard_scoring import StandardScoreCalculator

logger = logging.getLogger(__name__)


def _as_datetime(value: Any, field_name: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return parse_timestamp(str(value))
    except (TypeError, ValueError):
        raise InvalidWindow(f"Invalid {field_name}: {value!r}") from None


def _as_positive_int(value: Any, field_name: str, default: int, maximum: int) -> int:
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
    if number <= 0:
        raise ValidationError(f"{field_name} must be positive")
    if number > maximum:
        raise ValidationError(f"{field_name} must not exceed {maximum}")
    return number


def consistency_label(score: int) -> str:
    if score > 80:
        return "Excellent"
    if score > 60:
        return "Good"
    return "Needs Improvement"


class AnalyticsService:
    """Reports and dashboard analytics over the attendance ledger.

    Reads the whole ledger per computation and hands it to the pure functions
    in ``aggregation``. Analytics (not window reports) are cached per
    ``(kind, options)`` for the cache TTL.
    """

    def __init__(
        self,
        events: EventStore,
        users: Optional[UserRepository] = None,
        *,
        cache: Optional[AnalyticsCache] = None,
        calculator: Optional[ScoreCalculator] = None,
        expected_user_count: int = DEFAULT_EXPECTED_USER_COUNT,
        anomaly_threshold_hours: float = ANOMALY_THRESHOLD_HOURS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._events = events
        self._users = users
        self._cache = cache if cache is not None else AnalyticsCache()
        self._calculator = calculator if calculator is not None else StandardScoreCalculator()
        self._expected_user_count = int(expected_user_count)
        self._threshold = float(anomaly_threshold_hours)
        self._clock = clock

    def _load(self) -> tuple[list[AttendanceEvent], int]:
        valid, excluded = agg.validate_events(self._events.fetch_all())
        return valid, len(excluded)

    def _resolve_name(self, user_id: int) -> Optional[str]:
        if not self._users:
            return None
        user = self._users.get_by_id(user_id)
        return user.username if user else None

    def clear_cache(self) -> None:
        self._cache.clear()

    def get_window_report(
        self,
        window_type: Union[str, WindowType],
        *,
        start: Any = None,
        end: Any = None,
        now: Optional[datetime] = None,
    ) -> ReportWindow:
        now = now or self._clock()
        window = agg.coerce_window(window_type)
        start_at = _as_datetime(start, "start")
        end_at = _as_datetime(end, "end")
        lower, upper = agg.window_bounds(window, now, start=start_at, end=end_at)

        valid, excluded = self._load()
        records = agg.filter_by_window(valid, window, now, start=start_at, end=end_at)
        counts = agg.count_actions(records)
        return ReportWindow(
            type=window,
            start=lower,
            end=upper,
            records=records,
            sign_ins=counts.sign_ins,
            sign_outs=counts.sign_outs,
            excluded_records=excluded,
        )

    def get_analytics(
        self,
        kind: Union[str, AnalyticsKind],
        options: Optional[dict] = None,
        *,
        now: Optional[datetime] = None,
    ) -> AnalyticsSnapshot:
        try:
            kind = AnalyticsKind(kind)
        except ValueError:
            raise UnknownAnalyticsKind(f"Unknown analytics type: {kind}") from None

        options = dict(options or {})
        key = AnalyticsCache.make_key(kind.value, options)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        now = now or self._clock()
        valid, excluded = self._load()
        builders = {
            AnalyticsKind.ATTENDANCE: self._attendance_analytics,
            AnalyticsKind.USERS: self._user_analytics,
            AnalyticsKind.PRODUCTIVITY: self._productivity_analytics,
            AnalyticsKind.TRENDS: self._trend_analytics,
        }
        data = builders[kind](valid, options, now)
        data["excludedRecords"] = excluded

        snapshot = AnalyticsSnapshot(kind=kind, generated_at=now, data=data)
        self._cache.put(key, snapshot)
        logger.debug("Computed %s analytics over %d events", kind.value, len(valid))
        return snapshot

    def get_user_anomalies(self, user_id: int, *, now: Optional[datetime] = None) -> list[Anomaly]:
        now = now or self._clock()
        valid, _ = self._load()
        return agg.detect_user_anomalies(valid, user_id, now, threshold_hours=self._threshold)

    def _scoped(
        self,
        events: Sequence[AttendanceEvent],
        options: dict,
        now: datetime,
        default_window: Optional[WindowType],
    ) -> list[AttendanceEvent]:
        window = options.get("window") or default_window
        start = _as_datetime(options.get("start"), "start")
        end = _as_datetime(options.get("end"), "end")
        if window is None and (start or end):
            window = WindowType.CUSTOM

        scoped = list(events)
        if window is not None:
            scoped = agg.filter_by_window(scoped, window, now, start=start, end=end)
        return agg.filter_by_users(scoped, options.get("users"))

    def _attendance_analytics(self, events, options: dict, now: datetime) -> dict:
        records = self._scoped(events, options, now, WindowType.MONTHLY)
        top_n = _as_positive_int(options.get("top_n"), "top_n", DEFAULT_PEAK_HOURS, MAX_PEAK_HOURS)
        hourly = agg.breakdown_by_hour(records)
        counts = agg.count_actions(records)
        return {
            "totalRecords": len(records),
            "uniqueUsers": agg.unique_users(records),
            "signInCount": counts.sign_ins,
            "signOutCount": counts.sign_outs,
            "dailyAverage": agg.daily_average(records),
            "hourlyBreakdown": hourly,
            "dailyBreakdown": {d: c.to_dict() for d, c in agg.breakdown_by_day(records).items()},
            "userActivity": {
                name: c.to_dict() for name, c in agg.breakdown_by_user(records, self._resolve_name).items()
            },
            "peakHours": [h.to_dict() for h in agg.peak_hours(hourly, top_n)],
            "anomalies": [a.to_dict() for a in agg.detect_anomalies(records, threshold_hours=self._threshold)],
        }

    def _user_analytics(self, events, options: dict, now: datetime) -> dict:
        records = self._scoped(events, options, now, WindowType.MONTHLY)
        registered = list(self._users.list_all()) if self._users else []
        by_user = agg.breakdown_by_user(records, self._resolve_name)

        most_active = None
        if by_user:
            name, counts = max(by_user.items(), key=lambda item: item[1].total)
            most_active = {"username": name, "totalActions": counts.total}

        today = agg.filter_by_window(events, WindowType.DAILY, now)
        return {
            "registeredUsers": len(registered),
            "activeAccounts": sum(1 for u in registered if u.is_active),
            "usersWithActivity": len(by_user),
            "usersActiveToday": agg.unique_users(today),
            "mostActiveUser": most_active,
            "userBreakdown": {n: {**c.to_dict(), "total": c.total} for n, c in by_user.items()},
        }

    def _productivity_analytics(self, events, options: dict, now: datetime) -> dict:
        events = agg.filter_by_users(events, options.get("users"))
        today = agg.filter_by_window(events, WindowType.DAILY, now)
        last_week = agg.filter_by_window(events, WindowType.WEEKLY, now)
        today_counts = agg.count_actions(today)
        active_today = agg.unique_users(today)
        calc = self._calculator
        return {
            "totalEmployeesToday": active_today,
            "expectedUserCount": self._expected_user_count,
            "attendanceRate": calc.attendance_rate(
                active_users_today=active_today,
                expected_user_count=self._expected_user_count,
            ),
            "productivityScore": calc.productivity_score(today_event_count=len(today)),
            "consistencyScore": calc.consistency_score(active_days_last_week=len(agg.active_days(last_week))),
            "averageWorkHours": calc.average_work_hours(
                sign_ins=today_counts.sign_ins,
                sign_outs=today_counts.sign_outs,
            ),
        }

    def _trend_analytics(self, events, options: dict, now: datetime) -> dict:
        days = _as_positive_int(options.get("days"), "days", DEFAULT_TREND_DAYS, MAX_TREND_DAYS)
        records = self._scoped(events, options, now, None)

        by_day = agg.breakdown_by_day(records)
        series = []
        for offset in range(days - 1, -1, -1):
            day = (now - timedelta(days=offset)).date().isoformat()
            counts = by_day.get(day)
            series.append(
                {
                    "date": day,
                    "signIns": counts.sign_ins if counts else 0,
                    "signOuts": counts.sign_outs if counts else 0,
                }
            )

        last_week = agg.filter_by_window(records, WindowType.WEEKLY, now)
        last_month = agg.filter_by_window(records, WindowType.MONTHLY, now)
        by_user_month = agg.breakdown_by_user(last_month, self._resolve_name)
        top_performer = "N/A"
        if by_user_month:
            top_performer = max(by_user_month.items(), key=lambda item: item[1].total)[0]

        consistency = self._calculator.consistency_score(active_days_last_week=len(agg.active_days(last_week)))
        return {
            "days": days,
            "series": series,
            "weeklyAverage": agg.round_half_up(len(last_week) / WEEKLY_WINDOW_DAYS),
            "monthlyTotal": len(last_month),
            "topPerformer": top_performer,
            "consistencyScore": consistency,
            "insights": self._insights(records, consistency),
        }

    def _insights(self, records: Sequence[AttendanceEvent], consistency: int) -> list[str]:
        insights = []
        peaks = agg.peak_hours(agg.breakdown_by_hour(records), 1)
        if peaks:
            insights.append(f"Peak activity occurs at {peaks[0].hour}:00 with {peaks[0].count} actions")

        by_user = agg.breakdown_by_user(records, self._resolve_name)
        if by_user:
            name, counts = max(by_user.items(), key=lambda item: item[1].total)
            insights.append(f"Most active user: {name} with {counts.total} total actions")

        insights.append(f"Attendance consistency score: {consistency}% ({consistency_label(consistency)})")
        return insights
