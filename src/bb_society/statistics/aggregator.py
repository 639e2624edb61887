"""Pure reducers from attendance records to summary statistics.

Nothing here performs I/O or keeps state between calls; the same input
always produces the same output.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence, Union

from ..attendance.model import AttendanceRecord
from ..core.constants import MAX_SCORE, MIN_SCORE
from ..core.enums import AttendanceStatus, ScheduleStatus, ScorePolicy
from ..core.exceptions import ValidationError
from ..schedules.model import Schedule
from .model import NO_DATA, NoData, RubricSummary, ScheduleStatistics, StudentStatistics


@dataclass(frozen=True)
class _StatusCounts:
    present: int
    late: int
    absent: int


@dataclass(frozen=True)
class _Average:
    value: float
    graded: int


def round_one(value: float) -> float:
    """Round half away from zero to one decimal (66.65 -> 66.7)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _count_statuses(records: Sequence[AttendanceRecord]) -> _StatusCounts:
    # Unrecognized statuses fall in none of the buckets.
    present = late = absent = 0
    for r in records:
        if r.attendance_status == AttendanceStatus.PRESENT:
            present += 1
        elif r.attendance_status == AttendanceStatus.LATE:
            late += 1
        elif r.attendance_status == AttendanceStatus.ABSENT:
            absent += 1
    return _StatusCounts(present=present, late=late, absent=absent)


def _apply_policy(score: float, policy: ScorePolicy, field_name: str) -> float:
    if MIN_SCORE <= score <= MAX_SCORE or policy == ScorePolicy.PASS_THROUGH:
        return score
    if policy == ScorePolicy.CLAMP:
        return float(min(max(score, MIN_SCORE), MAX_SCORE))
    raise ValidationError(f"{field_name} out of range: {score:g}")


def _average(scores: Iterable[Optional[float]], policy: ScorePolicy, field_name: str) -> _Average:
    graded = [_apply_policy(float(s), policy, field_name) for s in scores if s is not None]
    if not graded:
        return _Average(value=0.0, graded=0)
    return _Average(value=round_one(sum(graded) / len(graded)), graded=len(graded))


def _attendance_rate(counts: _StatusCounts, total: int) -> float:
    if total == 0:
        return 0.0
    return round_one((counts.present + counts.late) / total * 100)


def compute_schedule_statistics(
    records: Sequence[AttendanceRecord],
    *,
    score_policy: ScorePolicy = ScorePolicy.PASS_THROUGH,
) -> Union[ScheduleStatistics, NoData]:
    """Reduce the records of one schedule into ``ScheduleStatistics``.

    Returns ``NO_DATA`` for an empty sequence. Scores are not validated
    under the default policy: out-of-range values flow into the averages
    as-is. ``ScorePolicy.CLAMP`` bounds them to [0, 100] and
    ``ScorePolicy.REJECT`` raises ``ValidationError`` instead.
    """

    if not records:
        return NO_DATA

    counts = _count_statuses(records)
    knowledge = _average((r.knowledge_score for r in records), score_policy, "knowledge_score")
    participation = _average((r.participation_score for r in records), score_policy, "participation_score")

    return ScheduleStatistics(
        student_count=len(records),
        present_count=counts.present,
        late_count=counts.late,
        absent_count=counts.absent,
        attendance_rate=_attendance_rate(counts, len(records)),
        avg_knowledge=knowledge.value,
        avg_participation=participation.value,
        knowledge_graded=knowledge.graded,
        participation_graded=participation.graded,
    )


def statistics_for_schedule(
    schedule: Schedule,
    records: Sequence[AttendanceRecord],
    *,
    score_policy: ScorePolicy = ScorePolicy.PASS_THROUGH,
) -> Union[ScheduleStatistics, NoData]:
    """Statistics only exist for completed schedules."""
    if schedule.status != ScheduleStatus.COMPLETED:
        return NO_DATA
    return compute_schedule_statistics(records, score_policy=score_policy)


def compute_student_statistics(
    records: Sequence[AttendanceRecord],
    *,
    score_policy: ScorePolicy = ScorePolicy.PASS_THROUGH,
) -> Union[StudentStatistics, NoData]:
    if not records:
        return NO_DATA

    counts = _count_statuses(records)
    knowledge = _average((r.knowledge_score for r in records), score_policy, "knowledge_score")
    participation = _average((r.participation_score for r in records), score_policy, "participation_score")

    return StudentStatistics(
        total_records=len(records),
        present_count=counts.present,
        late_count=counts.late,
        absent_count=counts.absent,
        assessed_count=sum(1 for r in records if r.is_assessed),
        attendance_rate=_attendance_rate(counts, len(records)),
        avg_knowledge=knowledge.value,
        avg_participation=participation.value,
        knowledge_graded=knowledge.graded,
        participation_graded=participation.graded,
    )


def assessment_progress(total_students: int, assessed_students: int) -> float:
    """Share of a school's students assessed for a schedule, in percent."""
    if total_students <= 0:
        return 0.0
    return round_one(min(assessed_students, total_students) / total_students * 100)


def _mean_level(levels: Iterable[Optional[int]]) -> Optional[float]:
    values = [int(v) for v in levels if v is not None]
    if not values:
        return None
    return round_one(sum(values) / len(values))


def compute_rubric_summary(records: Sequence[AttendanceRecord]) -> Union[RubricSummary, NoData]:
    """Average the four rubric levels over the present students of a schedule.

    Absent, late and unrecognized records are left out. Returns ``NO_DATA``
    for an empty sequence.
    """

    if not records:
        return NO_DATA

    present = [r for r in records if r.attendance_status == AttendanceStatus.PRESENT]
    complete = [r for r in present if r.is_fully_assessed]
    overall = [
        (
            r.personal_development_level
            + r.critical_thinking_level
            + r.team_work_level
            + r.academic_knowledge_level
        )
        / 4
        for r in complete
    ]

    return RubricSummary(
        present_students=len({r.student_id for r in present}),
        assessed_students=len({r.student_id for r in complete}),
        avg_personal=_mean_level(r.personal_development_level for r in present),
        avg_critical=_mean_level(r.critical_thinking_level for r in present),
        avg_teamwork=_mean_level(r.team_work_level for r in present),
        avg_academic=_mean_level(r.academic_knowledge_level for r in present),
        avg_overall=round_one(sum(overall) / len(overall)) if overall else None,
    )
