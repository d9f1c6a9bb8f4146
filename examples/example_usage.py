"""Example: use the service layer directly (no Flask).

Checks an employee in, files a leave, approves it and prints the month summary.
"""

import importlib
from datetime import timedelta

from config import get_settings_module

from src.hr_lifecycle.hr_lifecycle.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, timezone=settings.TIMEZONE)

    today = container.clock.today()
    print(container.attendance_service.check_in(employee_id=1))

    leave = container.leave_service.apply(
        1, "casual", today + timedelta(days=7), today + timedelta(days=8), "Family event"
    )
    container.leave_service.decide(leave.leave_id, "approved", approver_id=2)

    print(container.summary_service.attendance_summary(1, today.year, today.month))
    print(container.summary_service.leave_summary(1))


if __name__ == "__main__":
    main()
