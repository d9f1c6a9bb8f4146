from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.clock import Clock, SystemClock
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .summaries.service import SummaryService


@dataclass(frozen=True)
class Container:
    clock: Clock

    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository

    attendance_service: AttendanceService
    leave_service: LeaveService
    summary_service: SummaryService


def build_services(
    *,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    clock: Optional[Clock] = None,
) -> Container:
    clock = clock or SystemClock()
    return Container(
        clock=clock,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        attendance_service=AttendanceService(attendance_repo, clock=clock),
        leave_service=LeaveService(leaves_repo, clock=clock),
        summary_service=SummaryService(attendance_repo, leaves_repo),
    )


def build_container(*, db_config: dict, timezone: Optional[str] = None) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection(config)

    return build_services(
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        clock=SystemClock(timezone),
    )
