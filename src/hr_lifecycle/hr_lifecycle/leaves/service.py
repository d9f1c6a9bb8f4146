from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Union

from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import iter_days, ranges_overlap
from ..common.pagination import Page, page_window
from ..common.validators import optional_text, require_positive_id
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import AlreadyDecided, InvalidRange, NotFound, OverlappingRequest, ValidationError
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


def _coerce_leave_type(value: Union[LeaveType, str]) -> LeaveType:
    try:
        return LeaveType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in LeaveType)
        raise ValidationError(f"Invalid leave type {value!r}, expected one of: {allowed}")


def _coerce_decision(value: Union[LeaveStatus, str]) -> LeaveStatus:
    try:
        decision = LeaveStatus(value)
    except ValueError:
        decision = None
    if decision not in (LeaveStatus.APPROVED, LeaveStatus.REJECTED):
        raise ValidationError("Decision must be 'approved' or 'rejected'")
    return decision


class LeaveService:
    """Leave lifecycle: pending -> approved | rejected.

    Approval marks every day of the leave as LEAVE in the attendance ledger,
    in the same transaction as the status change.
    """

    def __init__(self, leaves: LeaveRepository, *, clock: Optional[Clock] = None):
        self._leaves = leaves
        self._clock = clock or SystemClock()

    def apply(
        self,
        employee_id: int,
        leave_type: Union[LeaveType, str],
        start_date: date,
        end_date: date,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        employee_id = require_positive_id(employee_id, "employee_id")
        leave_type = _coerce_leave_type(leave_type)
        reason = optional_text(reason, "reason")

        if end_date < start_date:
            raise InvalidRange("End date must be on or after start date")

        conflicts = [
            lr.leave_id
            for lr in self._leaves.list_active_for_employee(employee_id)
            if ranges_overlap(lr.start_date, lr.end_date, start_date, end_date)
        ]
        if conflicts:
            logger.warning(
                "Leave %s..%s for employee %s overlaps requests %s",
                start_date,
                end_date,
                employee_id,
                conflicts,
                extra={"employee_id": employee_id},
            )
            raise OverlappingRequest("You have an overlapping leave request")

        leave_id = self._leaves.create_leave(
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            created_at=self._clock.now(),
        )
        if leave_id is None:
            # Another application for an overlapping range landed first.
            raise OverlappingRequest("You have an overlapping leave request")

        logger.info(
            "Leave %s applied by employee %s (%s, %s..%s)",
            leave_id,
            employee_id,
            leave_type.value,
            start_date,
            end_date,
            extra={"employee_id": employee_id},
        )
        return self.get_by_id(leave_id)

    def decide(self, leave_id: int, decision: Union[LeaveStatus, str], approver_id: int) -> LeaveRequest:
        leave_id = require_positive_id(leave_id, "leave_id")
        approver_id = require_positive_id(approver_id, "approver_id")
        decision = _coerce_decision(decision)

        leave = self.get_by_id(leave_id)
        if leave.status.is_terminal:
            raise AlreadyDecided("Leave request has already been processed")

        if decision is LeaveStatus.APPROVED:
            days = list(iter_days(leave.start_date, leave.end_date))
            approver: Optional[int] = approver_id
        else:
            days = []
            approver = None

        decided = self._leaves.decide_leave(
            leave_id=leave_id,
            status=decision,
            approver_id=approver,
            decided_at=self._clock.now(),
            leave_days=days,
        )
        if not decided:
            raise AlreadyDecided("Leave request has already been processed")

        logger.info(
            "Leave %s %s by %s (%d attendance day(s) marked as leave)",
            leave_id,
            decision.value,
            approver_id,
            len(days),
            extra={"employee_id": leave.employee_id},
        )
        return self.get_by_id(leave_id)

    def get_by_id(self, leave_id: int) -> LeaveRequest:
        leave = self._leaves.get_by_id(require_positive_id(leave_id, "leave_id"))
        if not leave:
            raise NotFound("Leave not found")
        return leave

    def get_for_employee(
        self,
        employee_id: int,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Page[LeaveRequest]:
        return self._page(employee_id=require_positive_id(employee_id, "employee_id"), page=page, page_size=page_size)

    def get_pending(self, page: int = DEFAULT_PAGE, page_size: int = DEFAULT_PAGE_SIZE) -> Page[LeaveRequest]:
        return self._page(status=LeaveStatus.PENDING, page=page, page_size=page_size)

    def get_history(self, page: int = DEFAULT_PAGE, page_size: int = DEFAULT_PAGE_SIZE) -> Page[LeaveRequest]:
        return self._page(page=page, page_size=page_size)

    def _page(
        self,
        *,
        page: int,
        page_size: int,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Page[LeaveRequest]:
        offset, limit = page_window(page, page_size)
        items = self._leaves.list_leaves(employee_id=employee_id, status=status, offset=offset, limit=limit)
        total = self._leaves.count_leaves(employee_id=employee_id, status=status)
        return Page(items=list(items), page=int(page), page_size=limit, total=total)
