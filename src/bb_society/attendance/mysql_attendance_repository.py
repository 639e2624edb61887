from __future__ import annotations

import logging
from typing import Any, Dict, Sequence, Union

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, optional_float, optional_int
from .model import AssessmentEntry, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_SELECT_RECORD = """
    SELECT
        sa.id, sa.schedule_id, sa.student_id, sa.attendance_status,
        sa.knowledge_score, sa.participation_score,
        sa.personal_development_level, sa.critical_thinking_level,
        sa.team_work_level, sa.academic_knowledge_level,
        sa.notes,
        st.name AS student_name
    FROM student_attendance sa
    LEFT JOIN students st ON st.id = sa.student_id
"""


def _status(value: Any) -> Union[AttendanceStatus, str]:
    try:
        return AttendanceStatus(value)
    except ValueError:
        logger.warning("Unrecognized attendance_status %r kept as-is", value)
        return "" if value is None else str(value)


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["id"]),
        schedule_id=int(r["schedule_id"]),
        student_id=int(r["student_id"]),
        attendance_status=_status(r.get("attendance_status")),
        knowledge_score=optional_float(r.get("knowledge_score")),
        participation_score=optional_float(r.get("participation_score")),
        personal_development_level=optional_int(r.get("personal_development_level")),
        critical_thinking_level=optional_int(r.get("critical_thinking_level")),
        team_work_level=optional_int(r.get("team_work_level")),
        academic_knowledge_level=optional_int(r.get("academic_knowledge_level")),
        notes=r.get("notes"),
        student_name=r.get("student_name"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_schedule(self, schedule_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_RECORD + " WHERE sa.schedule_id=%s ORDER BY st.name ASC, sa.id ASC",
                (int(schedule_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_RECORD
                + """
                JOIN schedules s ON s.id = sa.schedule_id
                WHERE sa.student_id=%s
                ORDER BY s.scheduled_date DESC, s.scheduled_time DESC
                """,
                (int(student_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def upsert_many(self, *, schedule_id: int, entries: Sequence[AssessmentEntry]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            for e in entries:
                cur.execute(
                    """
                    INSERT INTO student_attendance(
                        schedule_id, student_id, attendance_status,
                        knowledge_score, participation_score,
                        personal_development_level, critical_thinking_level,
                        team_work_level, academic_knowledge_level, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        attendance_status=VALUES(attendance_status),
                        knowledge_score=VALUES(knowledge_score),
                        participation_score=VALUES(participation_score),
                        personal_development_level=VALUES(personal_development_level),
                        critical_thinking_level=VALUES(critical_thinking_level),
                        team_work_level=VALUES(team_work_level),
                        academic_knowledge_level=VALUES(academic_knowledge_level),
                        notes=VALUES(notes),
                        updated_at=CURRENT_TIMESTAMP
                    """,
                    (
                        int(schedule_id),
                        int(e.student_id),
                        e.attendance_status.value,
                        e.knowledge_score,
                        e.participation_score,
                        e.personal_development_level,
                        e.critical_thinking_level,
                        e.team_work_level,
                        e.academic_knowledge_level,
                        e.notes,
                    ),
                )
            return len(entries)
