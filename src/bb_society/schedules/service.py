from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

from ..attendance.repository import AttendanceRepository
from ..calendar_grid.indexer import (
    CalendarCell,
    CellSummary,
    build_calendar_grid,
    cell_summary,
    month_bounds,
    shift_month,
)
from ..common.datetime_utils import calendar_date, parse_clock_time
from ..common.validators import optional_positive_int, optional_text, positive_int_list, require_positive_int
from ..core.constants import DEFAULT_DURATION_MINUTES
from ..core.enums import ScheduleStatus, ScorePolicy
from ..core.exceptions import NotFoundError, ValidationError
from ..statistics.aggregator import assessment_progress, statistics_for_schedule
from ..statistics.model import NoData, ScheduleStatistics
from .model import Schedule, ScheduleInput, ScheduleProgress
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthCalendar:
    """A month grid plus the neighbouring months for navigation.

    With a preview limit the cells are ``CellSummary`` values instead of
    full ``CalendarCell`` values.
    """

    year: int
    month: int
    weeks: list[list[Optional[Union[CalendarCell, CellSummary]]]]
    schedule_count: int
    previous: tuple[int, int]
    next: tuple[int, int]


def parse_schedule_input(raw: Any, *, default_status: ScheduleStatus = ScheduleStatus.SCHEDULED) -> ScheduleInput:
    """Validate a schedule payload coming from the API."""

    if not isinstance(raw, dict):
        raise ValidationError("Schedule must be an object")

    for name in ("school_id", "scheduled_date", "scheduled_time"):
        if raw.get(name) in (None, ""):
            raise ValidationError("School, date and time are required")

    status_raw = raw.get("status")
    if status_raw in (None, ""):
        status = default_status
    else:
        try:
            status = ScheduleStatus(status_raw)
        except ValueError:
            raise ValidationError(f"Invalid status: {status_raw!r}")

    return ScheduleInput(
        school_id=require_positive_int(raw.get("school_id"), "school_id"),
        scheduled_date=calendar_date(raw.get("scheduled_date")),
        scheduled_time=parse_clock_time(raw.get("scheduled_time")),
        duration_minutes=optional_positive_int(raw.get("duration_minutes"), "duration_minutes", DEFAULT_DURATION_MINUTES),
        status=status,
        teacher_ids=positive_int_list(raw.get("teacher_ids"), "teacher_ids"),
        lesson_ids=positive_int_list(raw.get("lesson_ids"), "lesson_ids"),
        notes=optional_text(raw.get("notes")),
    )


def target_status(progress: ScheduleProgress, *, now: datetime) -> ScheduleStatus:
    """Status a still-open schedule should have at ``now``.

    Future sessions stay ``scheduled``. Past sessions become ``completed``
    once every student of the school is assessed, else ``in-progress``.
    """

    starts_at = datetime.combine(progress.scheduled_date, progress.scheduled_time)
    if starts_at > now:
        return ScheduleStatus.SCHEDULED
    if progress.assessed_students > 0 and progress.assessed_students >= progress.total_students:
        return ScheduleStatus.COMPLETED
    return ScheduleStatus.IN_PROGRESS


class ScheduleService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        attendance: AttendanceRepository,
        *,
        score_policy: ScorePolicy = ScorePolicy.PASS_THROUGH,
    ):
        self._schedules = schedules
        self._attendance = attendance
        self._score_policy = score_policy

    def get(self, schedule_id: int) -> Schedule:
        schedule = self._schedules.get_by_id(int(schedule_id))
        if not schedule:
            raise NotFoundError("Schedule not found")
        return schedule

    def create(self, payload: Any) -> Schedule:
        data = parse_schedule_input(payload)
        schedule_id = self._schedules.create(data)
        logger.info("Created schedule %s for school %s on %s", schedule_id, data.school_id, data.scheduled_date)
        return self.get(schedule_id)

    def update(self, schedule_id: int, payload: Any) -> Schedule:
        current = self.get(schedule_id)
        data = parse_schedule_input(payload, default_status=current.status)
        self._schedules.update(schedule_id=current.schedule_id, data=data)
        logger.info("Updated schedule %s", current.schedule_id)
        return self.get(current.schedule_id)

    def delete(self, schedule_id: int) -> None:
        current = self.get(schedule_id)
        if not self._schedules.delete(schedule_id=current.schedule_id):
            raise NotFoundError("Schedule not found")
        logger.info("Deleted schedule %s (%s)", current.schedule_id, current.scheduled_date)

    def calendar_for_month(
        self,
        *,
        year: int,
        month: int,
        school_id: Optional[int] = None,
        preview_limit: Optional[int] = None,
    ) -> MonthCalendar:
        start, end = month_bounds(year, month)
        schedules = self._schedules.list_range(start=start, end=end, school_id=school_id)
        weeks = build_calendar_grid(year, month, schedules)
        if preview_limit is not None:
            if preview_limit < 0:
                raise ValidationError("preview must not be negative")
            weeks = [[cell_summary(c, preview_limit) if c else None for c in week] for week in weeks]
        return MonthCalendar(
            year=int(year),
            month=int(month),
            weeks=weeks,
            schedule_count=len(schedules),
            previous=shift_month(year, month, -1),
            next=shift_month(year, month, 1),
        )

    def statistics_for(self, schedule_id: int) -> Union[ScheduleStatistics, NoData]:
        schedule = self.get(schedule_id)
        records = self._attendance.list_for_schedule(schedule.schedule_id)
        return statistics_for_schedule(schedule, records, score_policy=self._score_policy)

    def auto_update_statuses(self, *, now: datetime) -> int:
        changes = []
        for progress in self._schedules.list_open_progress():
            status = target_status(progress, now=now)
            if status == progress.status:
                continue
            changes.append((progress.schedule_id, status))
            logger.info(
                "Schedule %s: %s -> %s (%s%% assessed)",
                progress.schedule_id,
                progress.status.value,
                status.value,
                assessment_progress(progress.total_students, progress.assessed_students),
            )

        # All changes commit together or not at all.
        return self._schedules.update_statuses(changes)
