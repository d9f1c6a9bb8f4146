from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_employee_id, ok, query_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.summary_service

    def _target_employee() -> int:
        return query_int("employee_id") or current_employee_id()

    def _month_summary(employee_id):
        today = container.clock.today()
        return service.attendance_summary(
            employee_id,
            query_int("year", today.year),
            query_int("month", today.month),
        )

    @app.route("/api/summaries/attendance", methods=["GET"], endpoint="summary_attendance")
    def attendance_summary():
        return ok("Attendance summary", _month_summary(_target_employee()).to_dict())

    @app.route("/api/summaries/leave", methods=["GET"], endpoint="summary_leave")
    def leave_summary():
        return ok("Leave summary", service.leave_summary(_target_employee()).to_dict())

    @app.route("/api/summaries/organization/attendance", methods=["GET"], endpoint="summary_org_attendance")
    def organization_attendance_summary():
        return ok("Organization attendance summary", _month_summary(None).to_dict())

    @app.route("/api/summaries/organization/leave", methods=["GET"], endpoint="summary_org_leave")
    def organization_leave_summary():
        return ok("Organization leave summary", service.leave_summary(None).to_dict())

    @app.route("/api/summaries/unpaid-leave-days", methods=["GET"], endpoint="summary_unpaid_days")
    def unpaid_leave_days():
        start = parse_iso_date(request.args.get("start", ""))
        end = parse_iso_date(request.args.get("end", ""))
        days = service.unpaid_leave_days_in_period(_target_employee(), start, end)
        return ok(
            "Unpaid leave days",
            {"period_start": start.isoformat(), "period_end": end.isoformat(), "unpaid_days": days},
        )
