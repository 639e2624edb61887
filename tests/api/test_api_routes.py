from __future__ import annotations

from datetime import date, time
from types import SimpleNamespace

import pytest

from bb_society.attendance.service import AssessmentService
from bb_society.core.enums import AttendanceStatus, ScheduleStatus
from bb_society.dashboard.service import DashboardService
from bb_society.main import create_app
from bb_society.schedules.model import Schedule
from bb_society.schedules.service import ScheduleService


class FakeSchedules:
    def __init__(self, schedules):
        self._schedules = list(schedules)
        self.updates = []

    def get_by_id(self, schedule_id):
        return next((s for s in self._schedules if s.schedule_id == schedule_id), None)

    def list_range(self, *, start, end, school_id=None):
        return [
            s
            for s in self._schedules
            if start <= s.scheduled_date <= end and (school_id is None or s.school_id == school_id)
        ]

    def list_upcoming(self, *, from_date, limit):
        return [s for s in self._schedules if s.scheduled_date >= from_date][:limit]

    def list_recent(self, *, until, limit):
        past = [s for s in self._schedules if s.scheduled_date <= until]
        return sorted(past, key=lambda s: s.scheduled_date, reverse=True)[:limit]

    def list_open_progress(self):
        return []

    def update_statuses(self, changes):
        self.updates.extend(changes)
        return len(changes)

    def create(self, data):
        schedule_id = max(s.schedule_id for s in self._schedules) + 1
        self._schedules.append(
            Schedule(
                schedule_id=schedule_id,
                school_id=data.school_id,
                scheduled_date=data.scheduled_date,
                scheduled_time=data.scheduled_time,
                duration_minutes=data.duration_minutes,
                status=data.status,
                lesson_ids=data.lesson_ids,
                teacher_ids=data.teacher_ids,
                notes=data.notes,
            )
        )
        return schedule_id

    def update(self, *, schedule_id, data):
        self.delete(schedule_id=schedule_id)
        self._schedules.append(Schedule(schedule_id=schedule_id, **data.__dict__))

    def delete(self, *, schedule_id):
        before = len(self._schedules)
        self._schedules = [s for s in self._schedules if s.schedule_id != schedule_id]
        return len(self._schedules) < before


class FakeAttendance:
    def __init__(self, by_schedule):
        self._by_schedule = by_schedule
        self.saved = []

    def list_for_schedule(self, schedule_id):
        return self._by_schedule.get(schedule_id, [])

    def list_for_student(self, student_id):
        return [r for records in self._by_schedule.values() for r in records if r.student_id == student_id]

    def upsert_many(self, *, schedule_id, entries):
        self.saved.append((schedule_id, list(entries)))
        return len(entries)


class FakeDirectory:
    def count_schools(self):
        return 2

    def count_teachers(self):
        return 3

    def count_students(self, *, school_id=None):
        return 40


@pytest.fixture
def client(monkeypatch, make_schedule, make_record):
    monkeypatch.setenv("APP_ENV", "testing")

    completed = make_schedule(
        date(2025, 1, 10),
        status=ScheduleStatus.COMPLETED,
        scheduled_time=time(9, 30),
        school_name="Riverside Primary",
        teacher_names=("Ms Lee",),
    )
    upcoming = make_schedule(date(2025, 1, 20), school_id=2)
    records = [
        make_record(AttendanceStatus.PRESENT, knowledge=80, participation=90, schedule_id=completed.schedule_id),
        make_record(AttendanceStatus.LATE, knowledge=60, schedule_id=completed.schedule_id),
        make_record(AttendanceStatus.ABSENT, schedule_id=completed.schedule_id),
    ]

    schedules = FakeSchedules([completed, upcoming])
    attendance = FakeAttendance({completed.schedule_id: records})
    container = SimpleNamespace(
        schedule_service=ScheduleService(schedules, attendance),
        assessment_service=AssessmentService(attendance, schedules),
        dashboard_service=DashboardService(schedules, FakeDirectory(), attendance, max_workers=2),
        attendance=attendance,
    )

    app = create_app(container=container)
    client = app.test_client()
    client.container = container
    client.completed = completed
    client.upcoming = upcoming
    return client


def test_calendar_returns_sunday_first_weeks(client):
    resp = client.get("/api/schedules/calendar?year=2025&month=1")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    data = body["data"]
    assert (data["year"], data["month"], data["schedule_count"]) == (2025, 1, 2)
    assert all(len(week) == 7 for week in data["weeks"])
    assert data["weeks"][0][:3] == [None, None, None]

    cells = [c for week in data["weeks"] for c in week if c and c["schedules"]]
    assert [c["day"] for c in cells] == ["2025-01-10", "2025-01-20"]
    first = cells[0]["schedules"][0]
    assert first["scheduled_time"] == "09:30"
    assert first["status"] == "completed"
    assert first["teacher_names"] == ["Ms Lee"]


def test_calendar_filters_by_school(client):
    data = client.get("/api/schedules/calendar?year=2025&month=1&school_id=2").get_json()["data"]

    assert data["schedule_count"] == 1


def test_calendar_rejects_invalid_month(client):
    resp = client.get("/api/schedules/calendar?year=2025&month=13")

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_calendar_rejects_non_numeric_year(client):
    assert client.get("/api/schedules/calendar?year=abc&month=1").status_code == 400


def test_statistics_for_completed_schedule(client):
    resp = client.get(f"/api/schedules/{client.completed.schedule_id}/statistics")

    assert resp.status_code == 200
    stats = resp.get_json()["data"]
    assert stats["student_count"] == 3
    assert stats["attendance_rate"] == 66.7
    assert stats["avg_knowledge"] == 70.0
    assert stats["avg_participation"] == 90.0


def test_statistics_null_for_open_schedule(client):
    resp = client.get(f"/api/schedules/{client.upcoming.schedule_id}/statistics")

    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "data": None}


def test_statistics_for_unknown_schedule(client):
    resp = client.get("/api/schedules/999/statistics")

    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "Schedule not found"}


def test_auto_update_reports_count(client):
    resp = client.post("/api/schedules/auto-update-status")

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"updated_count": 0}


def test_assessment_list(client):
    resp = client.get(f"/api/schedules/{client.completed.schedule_id}/assessment")

    records = resp.get_json()["data"]
    assert [r["attendance_status"] for r in records] == ["present", "late", "absent"]


def test_assessment_save(client):
    resp = client.post(
        f"/api/schedules/{client.upcoming.schedule_id}/assessment",
        json=[{"student_id": 5, "knowledge_score": 75, "team_work_level": 3}],
    )

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"saved_count": 1}
    schedule_id, entries = client.container.attendance.saved[0]
    assert schedule_id == client.upcoming.schedule_id
    assert entries[0].team_work_level == 3


def test_assessment_save_requires_array(client):
    resp = client.post(f"/api/schedules/{client.upcoming.schedule_id}/assessment", json={"student_id": 5})

    assert resp.status_code == 400
    assert client.container.attendance.saved == []


def test_assessment_save_rejects_out_of_range_score(client):
    resp = client.post(
        f"/api/schedules/{client.upcoming.schedule_id}/assessment",
        json=[{"student_id": 5, "knowledge_score": 150}],
    )

    assert resp.status_code == 400
    assert "knowledge_score" in resp.get_json()["message"]


def test_student_statistics(client):
    records = client.container.attendance.list_for_schedule(client.completed.schedule_id)
    resp = client.get(f"/api/students/{records[0].student_id}/statistics")

    stats = resp.get_json()["data"]
    assert stats["total_records"] == 1
    assert stats["attendance_rate"] == 100.0


def test_student_statistics_without_records(client):
    assert client.get("/api/students/777/statistics").get_json()["data"] is None


def test_dashboard(client):
    resp = client.get("/api/dashboard")

    data = resp.get_json()["data"]
    assert resp.status_code == 200
    assert data["school_count"] == 2
    assert data["teacher_count"] == 3
    assert data["student_count"] == 40
    assert data["failed"] == []


def test_calendar_links_neighbouring_months(client):
    data = client.get("/api/schedules/calendar?year=2025&month=1").get_json()["data"]

    assert data["previous"] == [2024, 12]
    assert data["next"] == [2025, 2]


def test_calendar_preview_returns_cell_summaries(client):
    data = client.get("/api/schedules/calendar?year=2025&month=1&preview=0").get_json()["data"]

    cell = next(c for week in data["weeks"] for c in week if c and c["day"] == "2025-01-10")
    assert cell == {"day": "2025-01-10", "preview": [], "overflow": 1}


def test_assessment_save_rejects_nan_literal(client):
    resp = client.post(
        f"/api/schedules/{client.upcoming.schedule_id}/assessment",
        data='[{"student_id": 5, "knowledge_score": NaN}]',
        content_type="application/json",
    )

    assert resp.status_code == 400
    assert client.container.attendance.saved == []


def test_create_schedule(client):
    resp = client.post(
        "/api/schedules",
        json={
            "school_id": 2,
            "scheduled_date": "2025-01-24",
            "scheduled_time": "14:00",
            "teacher_ids": [3],
            "lesson_ids": [8, 9],
        },
    )

    assert resp.status_code == 201
    created = resp.get_json()["data"]
    assert created["scheduled_date"] == "2025-01-24"
    assert created["scheduled_time"] == "14:00"
    assert created["status"] == "scheduled"
    assert created["lesson_ids"] == [8, 9]

    calendar = client.get("/api/schedules/calendar?year=2025&month=1").get_json()["data"]
    assert calendar["schedule_count"] == 3


def test_create_schedule_requires_date_and_time(client):
    resp = client.post("/api/schedules", json={"school_id": 2})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_get_update_and_delete_schedule(client):
    schedule_id = client.upcoming.schedule_id

    assert client.get(f"/api/schedules/{schedule_id}").get_json()["data"]["schedule_id"] == schedule_id

    resp = client.put(
        f"/api/schedules/{schedule_id}",
        json={"school_id": 2, "scheduled_date": "2025-01-21", "scheduled_time": "10:00", "status": "cancelled"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "cancelled"

    assert client.delete(f"/api/schedules/{schedule_id}").get_json()["data"] == {"deleted": schedule_id}
    assert client.get(f"/api/schedules/{schedule_id}").status_code == 404


def test_update_unknown_schedule(client):
    resp = client.put(
        "/api/schedules/999", json={"school_id": 2, "scheduled_date": "2025-01-21", "scheduled_time": "10:00"}
    )

    assert resp.status_code == 404


def test_dashboard_overviews_carry_rubric_summary(client):
    data = client.get("/api/dashboard").get_json()["data"]

    overview = next(o for o in data["recent"] if o["schedule"]["schedule_id"] == client.completed.schedule_id)
    assert overview["total_students"] == 40
    assert overview["rubric"]["present_students"] == 1
    assert overview["rubric"]["avg_overall"] is None
