from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import AttendanceStatus, LeaveStatus, LeaveType
from ..core.exceptions import StoreFailure
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

_COLUMNS = (
    "leave_id, employee_id, leave_type, start_date, end_date, reason, "
    "status, approver_id, created_at, decided_at"
)
_ACTIVE = (LeaveStatus.PENDING.value, LeaveStatus.APPROVED.value)


def _to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r.get("reason"),
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        approver_id=int(r["approver_id"]) if r.get("approver_id") is not None else None,
        decided_at=r.get("decided_at"),
    )


def _where(*, employee_id: Optional[int], status: Optional[LeaveStatus]) -> tuple[str, list[object]]:
    clauses = ["1=1"]
    params: list[object] = []
    if employee_id is not None:
        clauses.append("employee_id=%s")
        params.append(int(employee_id))
    if status is not None:
        clauses.append("status=%s")
        params.append(status.value)
    return " AND ".join(clauses), params


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_leave(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
        created_at: datetime,
    ) -> Optional[int]:
        try:
            return self._insert_leave(
                employee_id=employee_id,
                leave_type=leave_type,
                start_date=start_date,
                end_date=end_date,
                reason=reason,
                created_at=created_at,
            )
        except StoreFailure as exc:
            # Two applications locking the same gap deadlock; InnoDB rolls one
            # back, and that one lost the overlap race.
            cause = exc.__cause__
            if isinstance(cause, mysql.connector.Error) and cause.errno == errorcode.ER_LOCK_DEADLOCK:
                logger.warning(
                    "Leave insert for employee %s lost a lock race", employee_id, extra={"employee_id": employee_id}
                )
                return None
            raise

    def _insert_leave(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
        created_at: datetime,
    ) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Locks the employee's index range so two overlapping applications
            # cannot both pass the check.
            cur.execute(
                """
                SELECT leave_id
                FROM leave_requests
                WHERE employee_id=%s AND status IN (%s, %s)
                  AND start_date <= %s AND end_date >= %s
                FOR UPDATE
                """,
                (int(employee_id), *_ACTIVE, end_date, start_date),
            )
            if fetchall(cur):
                return None

            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, reason, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    reason,
                    LeaveStatus.PENDING.value,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list_active_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE employee_id=%s AND status IN (%s, %s)
                ORDER BY start_date ASC
                """,
                (int(employee_id), *_ACTIVE),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_for_employee(
        self,
        employee_id: Optional[int],
        *,
        status: Optional[LeaveStatus] = None,
        leave_type: Optional[LeaveType] = None,
    ) -> Sequence[LeaveRequest]:
        where, params = _where(employee_id=employee_id, status=status)
        if leave_type is not None:
            where += " AND leave_type=%s"
            params.append(leave_type.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {where}
                ORDER BY start_date ASC
                """,
                tuple(params),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_leaves(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Sequence[LeaveRequest]:
        where, params = _where(employee_id=employee_id, status=status)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {where}
                ORDER BY created_at DESC, leave_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def count_leaves(self, *, employee_id: Optional[int] = None, status: Optional[LeaveStatus] = None) -> int:
        where, params = _where(employee_id=employee_id, status=status)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM leave_requests WHERE {where}", tuple(params))
            return fetch_count(cur)

    def decide_leave(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        approver_id: Optional[int],
        decided_at: datetime,
        leave_days: Sequence[date] = (),
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id
                FROM leave_requests
                WHERE leave_id=%s AND status=%s
                FOR UPDATE
                """,
                (int(leave_id), LeaveStatus.PENDING.value),
            )
            row = fetchone(cur)
            if not row:
                return False
            employee_id = int(row["employee_id"])

            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approver_id=%s, decided_at=%s
                WHERE leave_id=%s AND status=%s
                """,
                (status.value, approver_id, decided_at, int(leave_id), LeaveStatus.PENDING.value),
            )
            if cur.rowcount != 1:
                return False

            if leave_days:
                # Leave wins over whatever the day held; timestamps are kept.
                cur.executemany(
                    """
                    INSERT INTO attendance_records(employee_id, work_date, status)
                    VALUES(%s,%s,%s)
                    ON DUPLICATE KEY UPDATE status=VALUES(status)
                    """,
                    [(employee_id, day, AttendanceStatus.LEAVE.value) for day in leave_days],
                )
            return True
