from __future__ import annotations

from abc import ABC, abstractmethod


class ScoreCalculator(ABC):
    """Dashboard KPI heuristics (Strategy Pattern).

    Implementations must stay within 0..100 for the scores and never give a
    lower score for more activity.
    """

    @abstractmethod
    def attendance_rate(self, *, active_users_today: int, expected_user_count: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def productivity_score(self, *, today_event_count: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def consistency_score(self, *, active_days_last_week: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def average_work_hours(self, *, sign_ins: int, sign_outs: int) -> float:
        raise NotImplementedError
