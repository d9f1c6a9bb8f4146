from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, employee_id, work_date, check_in_time, check_out_time, status"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def upsert_checkin(self, *, employee_id: int, work_date: date, check_in_time: datetime) -> bool:
        # Affected rows: 1 = inserted, 2 = existing row updated, 0 = row
        # already had a check-in so every assignment kept its old value.
        # Assignments are evaluated left to right, so status must be set
        # before check_in_time changes.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, check_in_time, status)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status = IF(check_in_time IS NULL, VALUES(status), status),
                    check_in_time = IF(check_in_time IS NULL, VALUES(check_in_time), check_in_time)
                """,
                (int(employee_id), work_date, check_in_time, AttendanceStatus.PRESENT.value),
            )
            return cur.rowcount > 0

    def mark_checkout(self, *, employee_id: int, work_date: date, check_out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s
                WHERE employee_id=%s AND work_date=%s
                  AND check_in_time IS NOT NULL
                  AND check_out_time IS NULL
                  AND check_in_time <= %s
                """,
                (check_out_time, int(employee_id), work_date, check_out_time),
            )
            return cur.rowcount > 0

    def list_for_employee_between(
        self,
        *,
        employee_id: Optional[int],
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceRecord]:
        where = "work_date BETWEEN %s AND %s"
        params: list[object] = [start_date, end_date]
        if employee_id is not None:
            where += " AND employee_id=%s"
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date DESC, employee_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, *, work_date: date, offset: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE work_date=%s
                ORDER BY created_at DESC, attendance_id DESC
                LIMIT %s OFFSET %s
                """,
                (work_date, int(limit), int(offset)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_for_date(self, *, work_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM attendance_records WHERE work_date=%s", (work_date,))
            return fetch_count(cur)
