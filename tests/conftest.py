from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from src.hr_lifecycle.hr_lifecycle.attendance.model import AttendanceRecord
from src.hr_lifecycle.hr_lifecycle.common.datetime_utils import ranges_overlap
from src.hr_lifecycle.hr_lifecycle.container import build_services
from src.hr_lifecycle.hr_lifecycle.core.enums import AttendanceStatus, LeaveStatus
from src.hr_lifecycle.hr_lifecycle.core.exceptions import StoreFailure
from src.hr_lifecycle.hr_lifecycle.leaves.model import LeaveRequest


class FixedClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def today(self) -> date:
        return self.current.date()

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


class InMemoryAttendance:
    """Attendance store with the same atomicity as the MySQL adapter."""

    def __init__(self, lock: threading.RLock):
        self.lock = lock
        self.rows: dict[tuple[int, date], AttendanceRecord] = {}
        self._created: dict[tuple[int, date], int] = {}
        self._id = 0
        self.fail_on_days: set[date] = set()

    def _insert(self, record_key, **fields) -> AttendanceRecord:
        self._id += 1
        rec = AttendanceRecord(attendance_id=self._id, employee_id=record_key[0], work_date=record_key[1], **fields)
        self.rows[record_key] = rec
        self._created[record_key] = self._id
        return rec

    def seed(self, employee_id, work_date, *, status, check_in_time=None, check_out_time=None) -> AttendanceRecord:
        with self.lock:
            return self._insert(
                (employee_id, work_date),
                check_in_time=check_in_time,
                check_out_time=check_out_time,
                status=status,
            )

    def get_for_employee_and_date(self, employee_id, work_date) -> Optional[AttendanceRecord]:
        with self.lock:
            return self.rows.get((employee_id, work_date))

    def upsert_checkin(self, *, employee_id, work_date, check_in_time) -> bool:
        with self.lock:
            key = (employee_id, work_date)
            rec = self.rows.get(key)
            if rec is None:
                self._insert(key, check_in_time=check_in_time, check_out_time=None, status=AttendanceStatus.PRESENT)
                return True
            if rec.check_in_time is not None:
                return False
            self.rows[key] = replace(rec, check_in_time=check_in_time, status=AttendanceStatus.PRESENT)
            return True

    def mark_checkout(self, *, employee_id, work_date, check_out_time) -> bool:
        with self.lock:
            key = (employee_id, work_date)
            rec = self.rows.get(key)
            if rec is None or rec.check_in_time is None or rec.check_out_time is not None:
                return False
            if check_out_time < rec.check_in_time:
                return False
            self.rows[key] = replace(rec, check_out_time=check_out_time)
            return True

    def upsert_leave_day(self, employee_id, work_date) -> None:
        if work_date in self.fail_on_days:
            raise StoreFailure(f"write failed for {work_date}")
        key = (employee_id, work_date)
        rec = self.rows.get(key)
        if rec is None:
            self._insert(key, check_in_time=None, check_out_time=None, status=AttendanceStatus.LEAVE)
        else:
            self.rows[key] = replace(rec, status=AttendanceStatus.LEAVE)

    def list_for_employee_between(self, *, employee_id, start_date, end_date):
        with self.lock:
            items = [
                r for r in self.rows.values()
                if (employee_id is None or r.employee_id == employee_id) and start_date <= r.work_date <= end_date
            ]
        return sorted(items, key=lambda r: r.work_date, reverse=True)

    def _for_date(self, work_date):
        items = [(self._created[k], r) for k, r in self.rows.items() if k[1] == work_date]
        return [r for _, r in sorted(items, key=lambda pair: pair[0], reverse=True)]

    def list_for_date(self, *, work_date, offset, limit):
        with self.lock:
            return self._for_date(work_date)[offset:offset + limit]

    def count_for_date(self, *, work_date) -> int:
        with self.lock:
            return len(self._for_date(work_date))


class InMemoryLeaves:
    def __init__(self, lock: threading.RLock, attendance: InMemoryAttendance):
        self.lock = lock
        self.attendance = attendance
        self.rows: dict[int, LeaveRequest] = {}
        self._id = 0

    def create_leave(self, *, employee_id, leave_type, start_date, end_date, reason, created_at):
        with self.lock:
            for lr in self.rows.values():
                if (
                    lr.employee_id == employee_id
                    and lr.status.is_active
                    and ranges_overlap(lr.start_date, lr.end_date, start_date, end_date)
                ):
                    return None
            self._id += 1
            self.rows[self._id] = LeaveRequest(
                leave_id=self._id,
                employee_id=employee_id,
                leave_type=leave_type,
                start_date=start_date,
                end_date=end_date,
                reason=reason,
                status=LeaveStatus.PENDING,
                created_at=created_at,
            )
            return self._id

    def get_by_id(self, leave_id):
        with self.lock:
            return self.rows.get(int(leave_id))

    def list_active_for_employee(self, employee_id):
        with self.lock:
            return [lr for lr in self.rows.values() if lr.employee_id == employee_id and lr.status.is_active]

    def list_for_employee(self, employee_id, *, status=None, leave_type=None):
        with self.lock:
            return [
                lr for lr in self.rows.values()
                if (employee_id is None or lr.employee_id == employee_id)
                and (status is None or lr.status == status)
                and (leave_type is None or lr.leave_type == leave_type)
            ]

    def _filtered(self, employee_id, status):
        items = [
            lr for lr in self.rows.values()
            if (employee_id is None or lr.employee_id == employee_id) and (status is None or lr.status == status)
        ]
        return sorted(items, key=lambda lr: (lr.created_at, lr.leave_id), reverse=True)

    def list_leaves(self, *, employee_id=None, status=None, offset=0, limit=10):
        with self.lock:
            return self._filtered(employee_id, status)[offset:offset + limit]

    def count_leaves(self, *, employee_id=None, status=None):
        with self.lock:
            return len(self._filtered(employee_id, status))

    def decide_leave(self, *, leave_id, status, approver_id, decided_at, leave_days=()):
        with self.lock:
            leave = self.rows.get(int(leave_id))
            if leave is None or leave.status != LeaveStatus.PENDING:
                return False

            leaves_before = dict(self.rows)
            attendance_before = dict(self.attendance.rows)
            created_before = dict(self.attendance._created)
            try:
                self.rows[leave.leave_id] = replace(
                    leave, status=status, approver_id=approver_id, decided_at=decided_at
                )
                for day in leave_days:
                    self.attendance.upsert_leave_day(leave.employee_id, day)
            except Exception:
                self.rows = leaves_before
                self.attendance.rows = attendance_before
                self.attendance._created = created_before
                raise
            return True


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 11, 8, 30, 0))


@pytest.fixture
def store_lock() -> threading.RLock:
    return threading.RLock()


@pytest.fixture
def attendance_repo(store_lock) -> InMemoryAttendance:
    return InMemoryAttendance(store_lock)


@pytest.fixture
def leaves_repo(store_lock, attendance_repo) -> InMemoryLeaves:
    return InMemoryLeaves(store_lock, attendance_repo)


@pytest.fixture
def container(attendance_repo, leaves_repo, clock):
    return build_services(attendance_repo=attendance_repo, leaves_repo=leaves_repo, clock=clock)
