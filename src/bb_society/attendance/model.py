from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance/assessment for one schedule.

    ``attendance_status`` holds the raw stored string when it is not a known
    ``AttendanceStatus``; such records count toward no status bucket.
    Scores are ``None`` until graded.
    """

    attendance_id: int
    schedule_id: int
    student_id: int
    attendance_status: Union[AttendanceStatus, str]
    knowledge_score: Optional[float] = None
    participation_score: Optional[float] = None
    personal_development_level: Optional[int] = None
    critical_thinking_level: Optional[int] = None
    team_work_level: Optional[int] = None
    academic_knowledge_level: Optional[int] = None
    notes: Optional[str] = None
    student_name: Optional[str] = None

    @property
    def rubric_levels(self) -> tuple[Optional[int], ...]:
        return (
            self.personal_development_level,
            self.critical_thinking_level,
            self.team_work_level,
            self.academic_knowledge_level,
        )

    @property
    def is_assessed(self) -> bool:
        return any(level is not None for level in self.rubric_levels)

    @property
    def is_fully_assessed(self) -> bool:
        return all(level is not None for level in self.rubric_levels)


@dataclass(frozen=True)
class AssessmentEntry:
    """Validated input for creating/updating one attendance record."""

    student_id: int
    attendance_status: AttendanceStatus = AttendanceStatus.PRESENT
    knowledge_score: Optional[float] = None
    participation_score: Optional[float] = None
    personal_development_level: Optional[int] = None
    critical_thinking_level: Optional[int] = None
    team_work_level: Optional[int] = None
    academic_knowledge_level: Optional[int] = None
    notes: Optional[str] = None
