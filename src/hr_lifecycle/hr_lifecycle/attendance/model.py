from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One row per (employee, calendar day).

    Rows written by a leave approval carry status LEAVE and usually no
    timestamps.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "employee_id": self.employee_id,
            "date": self.work_date.isoformat(),
            "check_in": self.check_in_time.isoformat() if self.check_in_time else None,
            "check_out": self.check_out_time.isoformat() if self.check_out_time else None,
            "status": self.status.value,
        }
