from __future__ import annotations

import threading
from datetime import date

from src.hr_lifecycle.hr_lifecycle.core.exceptions import AlreadyCheckedIn


def test_parallel_check_ins_produce_exactly_one_record(container, attendance_repo):
    workers = 16
    barrier = threading.Barrier(workers)
    successes = []
    rejections = []
    unexpected = []

    def attempt():
        barrier.wait()
        try:
            container.attendance_service.check_in(42)
            successes.append(1)
        except AlreadyCheckedIn:
            rejections.append(1)
        except Exception as exc:  # pragma: no cover - reported by the assertion below
            unexpected.append(exc)

    threads = [threading.Thread(target=attempt) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert unexpected == []
    assert len(successes) == 1
    assert len(rejections) == workers - 1
    assert list(attendance_repo.rows) == [(42, date(2024, 3, 11))]


def test_parallel_check_outs_land_once(container, clock):
    container.attendance_service.check_in(42)
    clock.advance(hours=8)

    workers = 8
    barrier = threading.Barrier(workers)
    outcomes = []

    def attempt():
        barrier.wait()
        try:
            container.attendance_service.check_out(42)
            outcomes.append("ok")
        except Exception as exc:
            outcomes.append(type(exc).__name__)

    threads = [threading.Thread(target=attempt) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("AlreadyCheckedOut") == workers - 1
