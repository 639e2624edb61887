from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AssessmentService
from .core.constants import DEFAULT_DASHBOARD_WORKERS
from .core.enums import ScorePolicy
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .directory.mysql_directory_repository import MySQLDirectoryRepository
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    attendance_repo: MySQLAttendanceRepository
    schedules_repo: MySQLScheduleRepository
    directory_repo: MySQLDirectoryRepository

    schedule_service: ScheduleService
    assessment_service: AssessmentService
    dashboard_service: DashboardService


def build_container(
    *,
    db_config: dict,
    score_policy: ScorePolicy = ScorePolicy.PASS_THROUGH,
    dashboard_workers: int = DEFAULT_DASHBOARD_WORKERS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    attendance_repo = MySQLAttendanceRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    directory_repo = MySQLDirectoryRepository(conn)

    schedule_service = ScheduleService(schedules_repo, attendance_repo, score_policy=score_policy)
    assessment_service = AssessmentService(attendance_repo, schedules_repo, score_policy=score_policy)
    dashboard_service = DashboardService(
        schedules_repo, directory_repo, attendance_repo, max_workers=dashboard_workers
    )

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        schedules_repo=schedules_repo,
        directory_repo=directory_repo,
        schedule_service=schedule_service,
        assessment_service=assessment_service,
        dashboard_service=dashboard_service,
    )
