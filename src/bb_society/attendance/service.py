from __future__ import annotations

import logging
from typing import Any, Sequence, Union

from ..common.validators import (
    optional_int_in_range,
    optional_number_in_range,
    optional_text,
    require_positive_int,
)
from ..core.constants import MAX_RUBRIC_LEVEL, MAX_SCORE, MIN_RUBRIC_LEVEL, MIN_SCORE
from ..core.enums import AttendanceStatus, ScorePolicy
from ..core.exceptions import NotFoundError, ValidationError
from ..schedules.repository import ScheduleRepository
from ..statistics.aggregator import compute_student_statistics
from ..statistics.model import NoData, StudentStatistics
from .model import AssessmentEntry, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

RUBRIC_FIELDS = (
    "personal_development_level",
    "critical_thinking_level",
    "team_work_level",
    "academic_knowledge_level",
)


def parse_assessment_entry(raw: Any) -> AssessmentEntry:
    """Validate one assessment coming from the API.

    Scores and rubric levels are checked here, where records are produced;
    the statistics aggregator does not re-validate them.
    """

    if not isinstance(raw, dict):
        raise ValidationError("Each assessment must be an object")

    status_raw = raw.get("attendance_status") or AttendanceStatus.PRESENT.value
    try:
        status = AttendanceStatus(status_raw)
    except ValueError:
        raise ValidationError(f"Invalid attendance_status: {status_raw!r}")

    levels = {
        name: optional_int_in_range(raw.get(name), name, MIN_RUBRIC_LEVEL, MAX_RUBRIC_LEVEL)
        for name in RUBRIC_FIELDS
    }

    return AssessmentEntry(
        student_id=require_positive_int(raw.get("student_id"), "student_id"),
        attendance_status=status,
        knowledge_score=optional_number_in_range(raw.get("knowledge_score"), "knowledge_score", MIN_SCORE, MAX_SCORE),
        participation_score=optional_number_in_range(
            raw.get("participation_score"), "participation_score", MIN_SCORE, MAX_SCORE
        ),
        notes=optional_text(raw.get("notes")),
        **levels,
    )


class AssessmentService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        *,
        score_policy: ScorePolicy = ScorePolicy.PASS_THROUGH,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._score_policy = score_policy

    def _require_schedule(self, schedule_id: int) -> None:
        if not self._schedules.get_by_id(int(schedule_id)):
            raise NotFoundError("Schedule not found")

    def save_assessments(self, *, schedule_id: int, payload: Any) -> int:
        if not isinstance(payload, list):
            raise ValidationError("Assessments must be an array")

        self._require_schedule(schedule_id)

        entries = [parse_assessment_entry(raw) for raw in payload]
        student_ids = [e.student_id for e in entries]
        if len(set(student_ids)) != len(student_ids):
            raise ValidationError("Duplicate student_id in assessments")

        saved = self._attendance.upsert_many(schedule_id=int(schedule_id), entries=entries)
        logger.info("Saved %s assessments for schedule %s", saved, schedule_id)
        return saved

    def records_for_schedule(self, schedule_id: int) -> Sequence[AttendanceRecord]:
        self._require_schedule(schedule_id)
        return self._attendance.list_for_schedule(int(schedule_id))

    def student_statistics(self, student_id: int) -> Union[StudentStatistics, NoData]:
        records = self._attendance.list_for_student(require_positive_int(student_id, "student_id"))
        return compute_student_statistics(records, score_policy=self._score_policy)
