from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import calendar_date
from ..core.enums import ScheduleStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, json_list, normalize_mysql_time
from .model import Schedule, ScheduleInput, ScheduleProgress
from .repository import ScheduleRepository

# Related ids/names come back as JSON arrays so the model always gets lists.
_SELECT_SCHEDULE = """
    SELECT
        s.id, s.school_id, s.scheduled_date, s.scheduled_time,
        s.duration_minutes, s.status, s.notes,
        sch.name AS school_name,
        (SELECT JSON_ARRAYAGG(st.teacher_id) FROM schedule_teachers st
          WHERE st.schedule_id = s.id) AS teacher_ids,
        (SELECT JSON_ARRAYAGG(t.name) FROM schedule_teachers st
          JOIN teachers t ON t.id = st.teacher_id
          WHERE st.schedule_id = s.id) AS teacher_names,
        (SELECT JSON_ARRAYAGG(sl.lesson_id) FROM schedule_lessons sl
          WHERE sl.schedule_id = s.id) AS lesson_ids,
        (SELECT JSON_ARRAYAGG(l.title) FROM schedule_lessons sl
          JOIN lessons l ON l.id = sl.lesson_id
          WHERE sl.schedule_id = s.id) AS lesson_titles
    FROM schedules s
    LEFT JOIN schools sch ON sch.id = s.school_id
"""


def _to_schedule(r: Dict[str, Any]) -> Schedule:
    return Schedule(
        schedule_id=int(r["id"]),
        school_id=int(r["school_id"]),
        scheduled_date=calendar_date(r["scheduled_date"]),
        scheduled_time=normalize_mysql_time(r["scheduled_time"]),
        duration_minutes=int(r.get("duration_minutes") or 0),
        status=ScheduleStatus(r["status"]),
        lesson_ids=tuple(int(v) for v in json_list(r.get("lesson_ids"))),
        teacher_ids=tuple(int(v) for v in json_list(r.get("teacher_ids"))),
        notes=r.get("notes"),
        school_name=r.get("school_name"),
        teacher_names=tuple(str(v) for v in json_list(r.get("teacher_names"))),
        lesson_titles=tuple(str(v) for v in json_list(r.get("lesson_titles"))),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_SCHEDULE + " WHERE s.id=%s", (int(schedule_id),))
            r = fetchone(cur)
            if not r:
                return None
            return _to_schedule(r)

    def list_range(self, *, start: date, end: date, school_id: Optional[int] = None) -> Sequence[Schedule]:
        clauses = ["s.scheduled_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if school_id is not None:
            clauses.append("s.school_id=%s")
            params.append(int(school_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_SCHEDULE + f" WHERE {where} ORDER BY s.scheduled_date ASC, s.scheduled_time ASC",
                tuple(params),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def list_upcoming(self, *, from_date: date, limit: int) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_SCHEDULE
                + """
                WHERE s.scheduled_date >= %s AND s.status IN ('scheduled', 'rescheduled')
                ORDER BY s.scheduled_date ASC, s.scheduled_time ASC
                LIMIT %s
                """,
                (from_date, int(limit)),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def list_open_progress(self) -> Sequence[ScheduleProgress]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    s.id, s.scheduled_date, s.scheduled_time, s.status,
                    (SELECT COUNT(*) FROM students st WHERE st.school_id = s.school_id) AS total_students,
                    (SELECT COUNT(*) FROM student_attendance sa
                      WHERE sa.schedule_id = s.id
                        AND (sa.personal_development_level IS NOT NULL
                             OR sa.critical_thinking_level IS NOT NULL
                             OR sa.team_work_level IS NOT NULL
                             OR sa.academic_knowledge_level IS NOT NULL)
                    ) AS assessed_students
                FROM schedules s
                WHERE s.status IN ('scheduled', 'in-progress')
                ORDER BY s.scheduled_date, s.scheduled_time
                """
            )
            return [
                ScheduleProgress(
                    schedule_id=int(r["id"]),
                    scheduled_date=calendar_date(r["scheduled_date"]),
                    scheduled_time=normalize_mysql_time(r["scheduled_time"]),
                    status=ScheduleStatus(r["status"]),
                    total_students=int(r["total_students"] or 0),
                    assessed_students=int(r["assessed_students"] or 0),
                )
                for r in fetchall(cur)
            ]

    def list_recent(self, *, until: date, limit: int) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_SCHEDULE
                + """
                WHERE s.scheduled_date <= %s
                ORDER BY s.scheduled_date DESC, s.scheduled_time DESC
                LIMIT %s
                """,
                (until, int(limit)),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def update_statuses(self, changes: Sequence[tuple[int, ScheduleStatus]]) -> int:
        if not changes:
            return 0
        updated = 0
        # One cursor: a failing UPDATE rolls back the whole pass.
        with db_cursor(self._conn_factory) as (_, cur):
            for schedule_id, status in changes:
                cur.execute("UPDATE schedules SET status=%s WHERE id=%s", (status.value, int(schedule_id)))
                updated += max(cur.rowcount, 0)
        return updated

    def create(self, data: ScheduleInput) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedules(school_id, scheduled_date, scheduled_time, duration_minutes, status, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(data.school_id),
                    data.scheduled_date,
                    data.scheduled_time,
                    int(data.duration_minutes),
                    data.status.value,
                    data.notes,
                ),
            )
            schedule_id = int(cur.lastrowid)
            _insert_links(cur, schedule_id, data)
            return schedule_id

    def update(self, *, schedule_id: int, data: ScheduleInput) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE schedules
                SET school_id=%s, scheduled_date=%s, scheduled_time=%s,
                    duration_minutes=%s, status=%s, notes=%s
                WHERE id=%s
                """,
                (
                    int(data.school_id),
                    data.scheduled_date,
                    data.scheduled_time,
                    int(data.duration_minutes),
                    data.status.value,
                    data.notes,
                    int(schedule_id),
                ),
            )
            cur.execute("DELETE FROM schedule_teachers WHERE schedule_id=%s", (int(schedule_id),))
            cur.execute("DELETE FROM schedule_lessons WHERE schedule_id=%s", (int(schedule_id),))
            _insert_links(cur, int(schedule_id), data)

    def delete(self, *, schedule_id: int) -> bool:
        # Links and attendance rows go with it (ON DELETE CASCADE).
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schedules WHERE id=%s", (int(schedule_id),))
            return cur.rowcount > 0


def _insert_links(cur, schedule_id: int, data: ScheduleInput) -> None:
    if data.teacher_ids:
        cur.executemany(
            "INSERT INTO schedule_teachers(schedule_id, teacher_id) VALUES(%s,%s)",
            [(schedule_id, int(teacher_id)) for teacher_id in data.teacher_ids],
        )
    if data.lesson_ids:
        cur.executemany(
            "INSERT INTO schedule_lessons(schedule_id, lesson_id) VALUES(%s,%s)",
            [(schedule_id, int(lesson_id)) for lesson_id in data.lesson_ids],
        )
