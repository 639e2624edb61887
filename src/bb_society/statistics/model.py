from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NoData(Enum):
    """Sentinel for "nothing to aggregate" (falsy, serialized as null)."""

    NO_DATA = "no_data"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_DATA"


NO_DATA = NoData.NO_DATA


@dataclass(frozen=True)
class ScheduleStatistics:
    """Summary of the attendance records of one schedule (derived, not persisted).

    Averages are 0 when nothing is graded; ``knowledge_graded`` and
    ``participation_graded`` tell the UI when to show "N/A" instead.
    """

    student_count: int
    present_count: int
    late_count: int
    absent_count: int
    attendance_rate: float
    avg_knowledge: float
    avg_participation: float
    knowledge_graded: int
    participation_graded: int


@dataclass(frozen=True)
class StudentStatistics:
    """Summary of one student's records across schedules."""

    total_records: int
    present_count: int
    late_count: int
    absent_count: int
    assessed_count: int
    attendance_rate: float
    avg_knowledge: float
    avg_participation: float
    knowledge_graded: int
    participation_graded: int


@dataclass(frozen=True)
class RubricSummary:
    """Rubric levels (1..4) of the present students of one schedule.

    A student counts as assessed once all four levels are recorded;
    ``avg_overall`` is the mean of those students' four-level means.
    Averages are ``None`` when no level of that kind is recorded.
    """

    present_students: int
    assessed_students: int
    avg_personal: Optional[float]
    avg_critical: Optional[float]
    avg_teamwork: Optional[float]
    avg_academic: Optional[float]
    avg_overall: Optional[float]
