from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.hr_lifecycle.hr_lifecycle.core.enums import AttendanceStatus, LeaveType
from src.hr_lifecycle.hr_lifecycle.core.exceptions import InvalidRange, ValidationError


def _seed_month(attendance_repo, employee_id, statuses):
    day = date(2024, 3, 1)
    for status in statuses:
        attendance_repo.seed(employee_id, day, status=status)
        day += timedelta(days=1)


def test_attendance_summary_uses_calendar_days(container, attendance_repo):
    _seed_month(
        attendance_repo,
        3,
        [AttendanceStatus.PRESENT] * 20 + [AttendanceStatus.ABSENT] * 2 + [AttendanceStatus.LEAVE] * 3,
    )
    attendance_repo.seed(3, date(2024, 4, 1), status=AttendanceStatus.PRESENT)

    summary = container.summary_service.attendance_summary(3, 2024, 3)

    assert summary.total_days == 31
    assert summary.present == 20
    assert summary.absent == 2
    assert summary.leave == 3
    assert summary.half_day == 0
    assert summary.attendance_rate == round(20 / 31 * 100, 2) == 64.52


def test_attendance_summary_for_empty_month(container):
    summary = container.summary_service.attendance_summary(3, 2024, 2)

    assert summary.total_days == 29
    assert summary.attendance_rate == 0.0


def test_attendance_summary_rejects_bad_month(container):
    with pytest.raises(ValidationError):
        container.summary_service.attendance_summary(3, 2024, 0)


def test_leave_summary_counts_statuses_and_approved_days(container):
    svc = container.leave_service
    approved = svc.apply(3, LeaveType.ANNUAL, date(2024, 3, 10), date(2024, 3, 14))
    svc.decide(approved.leave_id, "approved", 1)
    rejected = svc.apply(3, LeaveType.SICK, date(2024, 3, 20), date(2024, 3, 21))
    svc.decide(rejected.leave_id, "rejected", 1)
    svc.apply(3, LeaveType.CASUAL, date(2024, 4, 1), date(2024, 4, 1))
    approved_single = svc.apply(3, LeaveType.UNPAID, date(2024, 5, 2), date(2024, 5, 2))
    svc.decide(approved_single.leave_id, "approved", 1)

    summary = container.summary_service.leave_summary(3)

    assert summary.total == 4
    assert summary.pending == 1
    assert summary.approved == 2
    assert summary.rejected == 1
    assert summary.total_days == 6


def test_unpaid_days_only_count_the_period_overlap(container):
    svc = container.leave_service
    leave = svc.apply(3, LeaveType.UNPAID, date(2024, 2, 25), date(2024, 3, 5))
    svc.decide(leave.leave_id, "approved", 1)

    days = container.summary_service.unpaid_leave_days_in_period(3, date(2024, 3, 1), date(2024, 3, 31))

    assert leave.days == 10
    assert days == 5


def test_unpaid_days_ignore_paid_pending_and_rejected_leave(container):
    svc = container.leave_service
    paid = svc.apply(3, LeaveType.ANNUAL, date(2024, 3, 1), date(2024, 3, 3))
    svc.decide(paid.leave_id, "approved", 1)
    rejected = svc.apply(3, LeaveType.UNPAID, date(2024, 3, 4), date(2024, 3, 6))
    svc.decide(rejected.leave_id, "rejected", 1)
    svc.apply(3, LeaveType.UNPAID, date(2024, 3, 7), date(2024, 3, 9))
    counted = svc.apply(3, LeaveType.UNPAID, date(2024, 3, 30), date(2024, 4, 2))
    svc.decide(counted.leave_id, "approved", 1)

    assert container.summary_service.unpaid_leave_days_in_period(3, date(2024, 3, 1), date(2024, 3, 31)) == 2
    assert container.summary_service.unpaid_leave_days_in_period(3, date(2024, 5, 1), date(2024, 5, 31)) == 0


def test_unpaid_days_rejects_inverted_period(container):
    with pytest.raises(InvalidRange):
        container.summary_service.unpaid_leave_days_in_period(3, date(2024, 3, 31), date(2024, 3, 1))


def test_attendance_summary_carries_its_month(container):
    summary = container.summary_service.attendance_summary(3, 2024, 3)

    assert (summary.year, summary.month) == (2024, 3)
    assert summary.to_dict()["month"] == 3


def test_organization_attendance_summary_counts_every_employee(container, attendance_repo):
    _seed_month(attendance_repo, 3, [AttendanceStatus.PRESENT] * 4)
    _seed_month(attendance_repo, 4, [AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.HALF_DAY])

    summary = container.summary_service.attendance_summary(None, 2024, 3)

    assert summary.present == 5
    assert summary.absent == 1
    assert summary.half_day == 1
    assert summary.attendance_rate == round(5 / 31 * 100, 2)


def test_leave_summary_lists_five_most_recent_requests(container, clock):
    svc = container.leave_service
    created = []
    for offset in range(6):
        created.append(svc.apply(3, LeaveType.CASUAL, date(2024, 4, 1 + offset), date(2024, 4, 1 + offset)))
        clock.advance(minutes=1)

    summary = container.summary_service.leave_summary(3)

    assert summary.total == 6
    assert [lr.leave_id for lr in summary.recent] == [lr.leave_id for lr in reversed(created)][:5]
    assert summary.to_dict()["recent"][0]["leave_id"] == created[-1].leave_id


def test_organization_leave_summary_spans_employees(container):
    svc = container.leave_service
    approved = svc.apply(3, LeaveType.ANNUAL, date(2024, 3, 10), date(2024, 3, 11))
    svc.decide(approved.leave_id, "approved", 1)
    svc.apply(4, LeaveType.SICK, date(2024, 3, 10), date(2024, 3, 10))

    summary = container.summary_service.leave_summary(None)

    assert summary.total == 2
    assert summary.pending == 1
    assert summary.approved == 1
    assert summary.total_days == 2
    assert {lr.employee_id for lr in summary.recent} == {3, 4}
