from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import days_in_month, month_range, overlap_days
from ..common.validators import require_positive_id
from ..core.constants import RECENT_LEAVES_LIMIT
from ..core.enums import AttendanceStatus, LeaveStatus, LeaveType
from ..core.exceptions import InvalidRange
from ..leaves.model import LeaveRequest
from ..leaves.repository import LeaveRepository


@dataclass(frozen=True)
class AttendanceSummary:
    year: int
    month: int
    total_days: int
    present: int
    absent: int
    leave: int
    half_day: int
    attendance_rate: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class LeaveSummary:
    total: int
    pending: int
    approved: int
    rejected: int
    total_days: int
    recent: Sequence[LeaveRequest] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "pending": self.pending,
            "approved": self.approved,
            "rejected": self.rejected,
            "total_days": self.total_days,
            "recent": [lr.to_dict() for lr in self.recent],
        }


def _optional_employee(employee_id: Optional[int]) -> Optional[int]:
    return None if employee_id is None else require_positive_id(employee_id, "employee_id")


class SummaryService:
    """Derived figures, recomputed from the ledgers on every call.

    Passing ``employee_id=None`` to the attendance and leave summaries gives
    the organisation-wide figures.
    """

    def __init__(self, attendance: AttendanceRepository, leaves: LeaveRepository):
        self._attendance = attendance
        self._leaves = leaves

    def attendance_summary(self, employee_id: Optional[int], year: int, month: int) -> AttendanceSummary:
        """Counts by status for one month.

        The rate divides present days by every calendar day of the month,
        weekends included; days without a record count toward neither side.
        """

        start, end = month_range(year, month)
        records = self._attendance.list_for_employee_between(
            employee_id=_optional_employee(employee_id),
            start_date=start,
            end_date=end,
        )
        counts = Counter(r.status for r in records)
        total_days = days_in_month(year, month)
        present = counts[AttendanceStatus.PRESENT]

        return AttendanceSummary(
            year=int(year),
            month=int(month),
            total_days=total_days,
            present=present,
            absent=counts[AttendanceStatus.ABSENT],
            leave=counts[AttendanceStatus.LEAVE],
            half_day=counts[AttendanceStatus.HALF_DAY],
            attendance_rate=round(present / total_days * 100, 2),
        )

    def leave_summary(self, employee_id: Optional[int]) -> LeaveSummary:
        employee_id = _optional_employee(employee_id)
        leaves = self._leaves.list_for_employee(employee_id)
        counts = Counter(lr.status for lr in leaves)
        recent = self._leaves.list_leaves(employee_id=employee_id, offset=0, limit=RECENT_LEAVES_LIMIT)
        return LeaveSummary(
            total=len(leaves),
            pending=counts[LeaveStatus.PENDING],
            approved=counts[LeaveStatus.APPROVED],
            rejected=counts[LeaveStatus.REJECTED],
            total_days=sum(lr.days for lr in leaves if lr.status is LeaveStatus.APPROVED),
            recent=tuple(recent),
        )

    def unpaid_leave_days_in_period(self, employee_id: int, period_start: date, period_end: date) -> int:
        """Approved unpaid leave days falling inside [period_start, period_end]."""

        if period_end < period_start:
            raise InvalidRange("Period end must be on or after period start")

        unpaid = self._leaves.list_for_employee(
            require_positive_id(employee_id, "employee_id"),
            status=LeaveStatus.APPROVED,
            leave_type=LeaveType.UNPAID,
        )
        return sum(overlap_days(lr.start_date, lr.end_date, period_start, period_end) for lr in unpaid)
