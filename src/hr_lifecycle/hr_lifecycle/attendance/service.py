from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import month_range
from ..common.pagination import Page, page_window
from ..common.validators import require_positive_id
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from ..core.exceptions import AlreadyCheckedIn, AlreadyCheckedOut, InvalidRange, NoCheckInFound
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Check-in/check-out ledger, one record per (employee, day)."""

    def __init__(self, attendance: AttendanceRepository, *, clock: Optional[Clock] = None):
        self._attendance = attendance
        self._clock = clock or SystemClock()

    def check_in(self, employee_id: int) -> AttendanceRecord:
        employee_id = require_positive_id(employee_id, "employee_id")
        now = self._clock.now()
        today = now.date()

        # Fast path for the common repeat click; the upsert below is what
        # actually arbitrates concurrent calls.
        existing = self._attendance.get_for_employee_and_date(employee_id, today)
        if existing and existing.check_in_time is not None:
            logger.warning(
                "Duplicate check-in for employee %s on %s", employee_id, today, extra={"employee_id": employee_id}
            )
            raise AlreadyCheckedIn("Already checked in for today")

        if not self._attendance.upsert_checkin(employee_id=employee_id, work_date=today, check_in_time=now):
            logger.warning(
                "Concurrent check-in lost for employee %s on %s", employee_id, today, extra={"employee_id": employee_id}
            )
            raise AlreadyCheckedIn("Already checked in for today")

        logger.info("Employee %s checked in at %s", employee_id, now.isoformat(), extra={"employee_id": employee_id})
        return self._attendance.get_for_employee_and_date(employee_id, today)

    def check_out(self, employee_id: int) -> AttendanceRecord:
        employee_id = require_positive_id(employee_id, "employee_id")
        now = self._clock.now()
        today = now.date()

        record = self._attendance.get_for_employee_and_date(employee_id, today)
        self._ensure_can_check_out(record, now)

        if not self._attendance.mark_checkout(employee_id=employee_id, work_date=today, check_out_time=now):
            # Lost a race; re-read to report what the winner did.
            self._ensure_can_check_out(self._attendance.get_for_employee_and_date(employee_id, today), now)
            raise AlreadyCheckedOut("Already checked out for today")

        logger.info("Employee %s checked out at %s", employee_id, now.isoformat(), extra={"employee_id": employee_id})
        return self._attendance.get_for_employee_and_date(employee_id, today)

    @staticmethod
    def _ensure_can_check_out(record: Optional[AttendanceRecord], now) -> None:
        if record is None or record.check_in_time is None:
            raise NoCheckInFound("No check-in found for today")
        if record.check_out_time is not None:
            raise AlreadyCheckedOut("Already checked out for today")
        if now < record.check_in_time:
            raise InvalidRange("Check-out time cannot be earlier than check-in time")

    def get_today(self, employee_id: int) -> Optional[AttendanceRecord]:
        return self.get_daily(employee_id, self._clock.today())

    def get_daily(self, employee_id: int, day: date) -> Optional[AttendanceRecord]:
        """None means no data for that day, not an error."""
        return self._attendance.get_for_employee_and_date(require_positive_id(employee_id, "employee_id"), day)

    def get_monthly(self, employee_id: int, year: int, month: int) -> Sequence[AttendanceRecord]:
        start, end = month_range(year, month)
        return self._attendance.list_for_employee_between(
            employee_id=require_positive_id(employee_id, "employee_id"),
            start_date=start,
            end_date=end,
        )

    def list_for_date(
        self,
        day: Optional[date] = None,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Page[AttendanceRecord]:
        day = day or self._clock.today()
        offset, limit = page_window(page, page_size)
        items = self._attendance.list_for_date(work_date=day, offset=offset, limit=limit)
        total = self._attendance.count_for_date(work_date=day)
        return Page(items=list(items), page=int(page), page_size=limit, total=total)
