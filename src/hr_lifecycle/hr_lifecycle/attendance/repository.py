from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert_checkin(self, *, employee_id: int, work_date: date, check_in_time: datetime) -> bool:
        """Atomically record a check-in for (employee, day).

        Creates the row (status PRESENT) or fills an existing row that has no
        check-in yet. Returns False, without writing, when the row already
        carries a check-in.
        """

        raise NotImplementedError

    def mark_checkout(self, *, employee_id: int, work_date: date, check_out_time: datetime) -> bool:
        """Set check-out once; False if there is no check-in, it is already
        set, or it would precede the check-in."""

        raise NotImplementedError

    def list_for_employee_between(
        self,
        *,
        employee_id: Optional[int],
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceRecord]:
        """Records in [start_date, end_date], newest day first.

        ``employee_id=None`` returns every employee's records.
        """

        raise NotImplementedError

    def list_for_date(self, *, work_date: date, offset: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_for_date(self, *, work_date: date) -> int:
        raise NotImplementedError
