from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_employee_id, ok, page_args, query_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _target_employee() -> int:
        # Approver views pass ?employee_id=; authorization is checked upstream.
        return query_int("employee_id") or current_employee_id()

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    def check_in():
        record = service.check_in(current_employee_id())
        return ok("Checked in successfully", record.to_dict(), 201)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    def check_out():
        record = service.check_out(current_employee_id())
        return ok("Checked out successfully", record.to_dict())

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    def today():
        record = service.get_today(current_employee_id())
        return ok("Today's attendance", record.to_dict() if record else None)

    @app.route("/api/attendance/daily", methods=["GET"], endpoint="attendance_daily")
    def daily():
        day = parse_iso_date(request.args.get("date", ""))
        record = service.get_daily(_target_employee(), day)
        if record is None:
            return ok("No attendance data for this date", None)
        return ok("Daily attendance", record.to_dict())

    @app.route("/api/attendance/monthly", methods=["GET"], endpoint="attendance_monthly")
    def monthly():
        today = container.clock.today()
        records = service.get_monthly(
            _target_employee(),
            query_int("year", today.year),
            query_int("month", today.month),
        )
        return ok("Monthly attendance", [r.to_dict() for r in records])

    @app.route("/api/attendance/by-date", methods=["GET"], endpoint="attendance_by_date")
    def by_date():
        raw = request.args.get("date")
        day = parse_iso_date(raw) if raw else None
        page, page_size = page_args()
        result = service.list_for_date(day, page, page_size)
        return ok("Attendance for date", result.to_dict(lambda r: r.to_dict()))
