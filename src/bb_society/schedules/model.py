from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.constants import DEFAULT_DURATION_MINUTES
from ..core.enums import ScheduleStatus


@dataclass(frozen=True)
class Schedule:
    """Domain entity: a teaching session at one school.

    ``teacher_names`` and ``lesson_titles`` are read-model fields filled by the
    repository, always as tuples of strings.
    """

    schedule_id: int
    school_id: int
    scheduled_date: date
    scheduled_time: time
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    status: ScheduleStatus = ScheduleStatus.SCHEDULED
    lesson_ids: tuple[int, ...] = ()
    teacher_ids: tuple[int, ...] = ()
    notes: Optional[str] = None
    school_name: Optional[str] = None
    teacher_names: tuple[str, ...] = ()
    lesson_titles: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScheduleProgress:
    """Read-model used by the status auto-update."""

    schedule_id: int
    scheduled_date: date
    scheduled_time: time
    status: ScheduleStatus
    total_students: int
    assessed_students: int


@dataclass(frozen=True)
class ScheduleInput:
    """Validated fields for creating or replacing a schedule and its links."""

    school_id: int
    scheduled_date: date
    scheduled_time: time
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    status: ScheduleStatus = ScheduleStatus.SCHEDULED
    teacher_ids: tuple[int, ...] = ()
    lesson_ids: tuple[int, ...] = ()
    notes: Optional[str] = None
