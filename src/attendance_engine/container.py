from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .captains.mysql_captain_repository import MySQLCaptainRepository
from .captains.service import CaptainService
from .classification.service import LiveStatusService
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_HISTORY_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .history.service import HistoryService
from .monitoring.service import MonitoringService
from .reports.mysql_report_cache_repository import MySQLReportCacheRepository
from .reports.service import ReportService
from .requirements.mysql_requirement_repository import MySQLRequirementRepository
from .roster.mysql_roster_repository import MySQLRosterRepository
from .roster.repository import RosterRepository
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .targeting.service import AudienceResolver


@dataclass(frozen=True)
class Container:
    roster_repo: RosterRepository

    resolver: AudienceResolver
    live_status_service: LiveStatusService
    history_service: HistoryService
    report_service: ReportService
    monitoring_service: MonitoringService
    captain_service: CaptainService

    conn: Optional[DatabaseConnection] = None
    clock: Callable[[], datetime] = now_local


def build_container(*, db_config: dict, history_days: int = DEFAULT_HISTORY_DAYS) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    schedules_repo = MySQLScheduleRepository(conn)
    requirements_repo = MySQLRequirementRepository(conn)
    roster_repo = MySQLRosterRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    captains_repo = MySQLCaptainRepository(conn)
    report_cache_repo = MySQLReportCacheRepository(conn)

    resolver = AudienceResolver(schedules_repo, requirements_repo, roster_repo)
    live_status_service = LiveStatusService(resolver, attendance_repo)

    return Container(
        roster_repo=roster_repo,
        resolver=resolver,
        live_status_service=live_status_service,
        history_service=HistoryService(resolver, attendance_repo, default_days=history_days),
        report_service=ReportService(resolver, attendance_repo, roster_repo, cache=report_cache_repo),
        monitoring_service=MonitoringService(resolver, live_status_service, roster_repo),
        captain_service=CaptainService(captains_repo, roster_repo),
        conn=conn,
    )
