from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .activity.json_activity_repository import JsonActivityLogRepository
from .activity.service import ActivityLogService
from .analytics.cache import AnalyticsCache
from .analytics.scoring.standard_scoring import StandardScoreCalculator
from .analytics.service import AnalyticsService
from .core.constants import (
    ANALYTICS_CACHE_TTL_SECONDS,
    ANOMALY_THRESHOLD_HOURS,
    DEFAULT_EXPECTED_USER_COUNT,
    MAX_BACKUPS,
)
from .devices.json_device_repository import JsonDeviceRepository
from .ledger.json_event_store import JsonEventStore
from .ledger.service import AttendanceService
from .storage.backup import BackupService
from .storage.json_store import JsonFileStore
from .tasks.json_task_repository import JsonTaskRepository
from .tasks.service import TaskService
from .users.json_user_repository import JsonUserRepository
from .users.service import AuthService, UserService
from .users.throttle import LoginThrottle


@dataclass(frozen=True)
class Container:
    store: JsonFileStore

    users_repo: JsonUserRepository
    event_store: JsonEventStore
    tasks_repo: JsonTaskRepository
    devices_repo: JsonDeviceRepository
    logs_repo: JsonActivityLogRepository

    auth_service: AuthService
    user_service: UserService
    activity_service: ActivityLogService
    attendance_service: AttendanceService
    analytics_service: AnalyticsService
    task_service: TaskService
    backup_service: BackupService


def build_container(
    *,
    data_dir: str | Path,
    backup_dir: str | Path,
    expected_user_count: int = DEFAULT_EXPECTED_USER_COUNT,
    cache_ttl_seconds: float = ANALYTICS_CACHE_TTL_SECONDS,
    anomaly_threshold_hours: float = ANOMALY_THRESHOLD_HOURS,
    max_backups: int = MAX_BACKUPS,
) -> Container:
    store = JsonFileStore.get_instance(data_dir)

    users_repo = JsonUserRepository(store)
    event_store = JsonEventStore(store)
    tasks_repo = JsonTaskRepository(store)
    devices_repo = JsonDeviceRepository(store)
    logs_repo = JsonActivityLogRepository(store)

    activity_service = ActivityLogService(logs_repo)
    auth_service = AuthService(users_repo, LoginThrottle())
    user_service = UserService(users_repo)
    attendance_service = AttendanceService(event_store, activity_service)
    analytics_service = AnalyticsService(
        event_store,
        users_repo,
        cache=AnalyticsCache(cache_ttl_seconds),
        calculator=StandardScoreCalculator(),
        expected_user_count=expected_user_count,
        anomaly_threshold_hours=anomaly_threshold_hours,
    )
    task_service = TaskService(tasks_repo, users_repo)
    backup_service = BackupService(store, backup_dir, max_backups=max_backups)

    return Container(
        store=store,
        users_repo=users_repo,
        event_store=event_store,
        tasks_repo=tasks_repo,
        devices_repo=devices_repo,
        logs_repo=logs_repo,
        auth_service=auth_service,
        user_service=user_service,
        activity_service=activity_service,
        attendance_service=attendance_service,
        analytics_service=analytics_service,
        task_service=task_service,
        backup_service=backup_service,
    )
