from __future__ import annotations

from datetime import date, datetime, time

import pytest

from bb_society.attendance.model import AttendanceRecord
from bb_society.core.enums import AttendanceStatus, ScheduleStatus
from bb_society.schedules.model import Schedule


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 1, 15, 10, 0, 0)


@pytest.fixture
def make_record():
    counter = {"id": 0}

    def _make(status=AttendanceStatus.PRESENT, knowledge=None, participation=None, **kwargs) -> AttendanceRecord:
        counter["id"] += 1
        values = {
            "attendance_id": counter["id"],
            "schedule_id": 1,
            "student_id": counter["id"],
            "attendance_status": status,
            "knowledge_score": knowledge,
            "participation_score": participation,
        }
        values.update(kwargs)
        return AttendanceRecord(**values)

    return _make


@pytest.fixture
def make_schedule():
    counter = {"id": 0}

    def _make(scheduled_date: date, *, status=ScheduleStatus.SCHEDULED, scheduled_time=time(9, 0), **kwargs) -> Schedule:
        counter["id"] += 1
        values = {
            "schedule_id": counter["id"],
            "school_id": 1,
            "scheduled_date": scheduled_date,
            "scheduled_time": scheduled_time,
            "status": status,
        }
        values.update(kwargs)
        return Schedule(**values)

    return _make
