"""Helpers shared by the Flask controllers."""

from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    AlreadyDecided,
    DomainError,
    InvalidRange,
    NoCheckInFound,
    NotFound,
    OverlappingRequest,
    StoreFailure,
    ValidationError,
)
from .validators import require_positive_id

logger = logging.getLogger(__name__)

EMPLOYEE_HEADER = "X-Employee-Id"

_STATUS_BY_ERROR = (
    (NotFound, 404),
    (AlreadyCheckedIn, 409),
    (AlreadyCheckedOut, 409),
    (AlreadyDecided, 409),
    (OverlappingRequest, 409),
    (InvalidRange, 400),
    (NoCheckInFound, 400),
    (ValidationError, 400),
    (StoreFailure, 503),
)


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def ok(message: str, data: Any = None, status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def current_employee_id() -> int:
    """Identity set by the upstream authentication layer."""
    return require_positive_id(request.headers.get(EMPLOYEE_HEADER), EMPLOYEE_HEADER)


def query_int(name: str, default: Optional[int] = None) -> Optional[int]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def page_args() -> tuple[int, int]:
    return query_int("page", DEFAULT_PAGE), query_int("page_size", DEFAULT_PAGE_SIZE)


def json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        if status >= 500:
            logger.error("Store failure on %s %s: %s", request.method, request.path, error)
            return fail("Service temporarily unavailable", status)
        return fail(str(error), status)
