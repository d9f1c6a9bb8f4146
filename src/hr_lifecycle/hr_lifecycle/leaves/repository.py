from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
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
        """Insert a PENDING request.

        Returns None, without inserting, when a pending or approved request of
        the same employee overlaps [start_date, end_date] at insert time.
        """

        raise NotImplementedError

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_active_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        """Pending and approved requests of one employee."""

        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: Optional[int],
        *,
        status: Optional[LeaveStatus] = None,
        leave_type: Optional[LeaveType] = None,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_leaves(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Sequence[LeaveRequest]:
        """Newest first."""

        raise NotImplementedError

    def count_leaves(self, *, employee_id: Optional[int] = None, status: Optional[LeaveStatus] = None) -> int:
        raise NotImplementedError

    def decide_leave(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        approver_id: Optional[int],
        decided_at: datetime,
        leave_days: Sequence[date] = (),
    ) -> bool:
        """Move a PENDING request to ``status`` in one transaction.

        Every day in ``leave_days`` is upserted into the attendance store with
        status LEAVE inside the same transaction. Returns False, writing
        nothing, if the request is no longer pending. Any failure rolls back
        both the status change and the day writes.
        """

        raise NotImplementedError
