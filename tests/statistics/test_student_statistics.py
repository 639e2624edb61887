from __future__ import annotations

from bb_society.core.enums import AttendanceStatus
from bb_society.statistics.aggregator import assessment_progress, compute_student_statistics
from bb_society.statistics.model import NO_DATA


def test_student_statistics_across_schedules(make_record):
    records = [
        make_record(AttendanceStatus.PRESENT, knowledge=90, participation=80, schedule_id=1, team_work_level=3),
        make_record(AttendanceStatus.PRESENT, knowledge=70, schedule_id=2),
        make_record(AttendanceStatus.LATE, schedule_id=3, critical_thinking_level=2),
        make_record(AttendanceStatus.ABSENT, schedule_id=4),
    ]

    stats = compute_student_statistics(records)

    assert stats.total_records == 4
    assert stats.present_count == 2
    assert stats.late_count == 1
    assert stats.absent_count == 1
    assert stats.assessed_count == 2
    assert stats.attendance_rate == 75.0
    assert stats.avg_knowledge == 80.0
    assert stats.avg_participation == 80.0


def test_student_without_records_has_no_data():
    assert compute_student_statistics([]) is NO_DATA


def test_assessment_progress():
    assert assessment_progress(0, 0) == 0
    assert assessment_progress(3, 1) == 33.3
    assert assessment_progress(4, 4) == 100.0
    assert assessment_progress(2, 5) == 100.0
