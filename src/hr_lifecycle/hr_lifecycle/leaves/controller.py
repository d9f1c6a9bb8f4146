from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_employee_id, json_body, ok, page_args
from ..container import Container


def _serialize(leave) -> dict:
    return leave.to_dict()


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="leave_apply")
    def apply():
        body = json_body()
        leave = service.apply(
            current_employee_id(),
            body.get("leave_type", ""),
            parse_iso_date(body.get("start_date", "")),
            parse_iso_date(body.get("end_date", "")),
            body.get("reason"),
        )
        return ok("Leave request submitted", leave.to_dict(), 201)

    @app.route("/api/leaves/mine", methods=["GET"], endpoint="leave_mine")
    def mine():
        page, page_size = page_args()
        result = service.get_for_employee(current_employee_id(), page, page_size)
        return ok("Your leave requests", result.to_dict(_serialize))

    @app.route("/api/leaves/employee/<int:employee_id>", methods=["GET"], endpoint="leave_for_employee")
    def for_employee(employee_id: int):
        page, page_size = page_args()
        result = service.get_for_employee(employee_id, page, page_size)
        return ok("Leave requests", result.to_dict(_serialize))

    @app.route("/api/leaves/pending", methods=["GET"], endpoint="leave_pending")
    def pending():
        page, page_size = page_args()
        return ok("Pending leave requests", service.get_pending(page, page_size).to_dict(_serialize))

    @app.route("/api/leaves/history", methods=["GET"], endpoint="leave_history")
    def history():
        page, page_size = page_args()
        return ok("Leave history", service.get_history(page, page_size).to_dict(_serialize))

    @app.route("/api/leaves/<int:leave_id>", methods=["GET"], endpoint="leave_detail")
    def detail(leave_id: int):
        return ok("Leave request", service.get_by_id(leave_id).to_dict())

    @app.route("/api/leaves/<int:leave_id>/status", methods=["PATCH"], endpoint="leave_decide")
    def decide(leave_id: int):
        body = json_body()
        leave = service.decide(leave_id, body.get("status", ""), current_employee_id())
        return ok(f"Leave {leave.status.value}", leave.to_dict())
