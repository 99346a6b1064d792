from __future__ import annotations

from ...core.constants import (
    PRODUCTIVITY_BASE_SCORE,
    PRODUCTIVITY_MAX_BONUS,
    PRODUCTIVITY_POINTS_PER_EVENT,
    STANDARD_WORK_HOURS,
    WEEKLY_WINDOW_DAYS,
)
from .base import ScoreCalculator


def _percent(part: float, whole: float) -> int:
    return int(part / whole * 100 + 0.5)


class StandardScoreCalculator(ScoreCalculator):
    """Default dashboard formulas.

    attendance rate   = round(active users today / expected users * 100)
    productivity      = min(75 + min(events today * 2, 25), 100)
    consistency       = round(active days in last 7 / 7 * 100), capped at 100
    average work hours = sign-outs / max(sign-ins, 1) * 8, 0 without sign-outs
    """

    def attendance_rate(self, *, active_users_today: int, expected_user_count: int) -> int:
        if expected_user_count <= 0:
            return 0
        return _percent(max(active_users_today, 0), expected_user_count)

    def productivity_score(self, *, today_event_count: int) -> int:
        bonus = min(max(today_event_count, 0) * PRODUCTIVITY_POINTS_PER_EVENT, PRODUCTIVITY_MAX_BONUS)
        return min(PRODUCTIVITY_BASE_SCORE + bonus, 100)

    def consistency_score(self, *, active_days_last_week: int) -> int:
        # The 7-day lookback can touch 8 calendar dates.
        return min(_percent(max(active_days_last_week, 0), WEEKLY_WINDOW_DAYS), 100)

    def average_work_hours(self, *, sign_ins: int, sign_outs: int) -> float:
        if sign_outs <= 0:
            return 0.0
        return round(sign_outs / max(sign_ins, 1) * STANDARD_WORK_HOURS, 1)
