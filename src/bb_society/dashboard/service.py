from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Callable, Optional, Sequence, Union

from ..attendance.repository import AttendanceRepository
from ..calendar_grid.indexer import CalendarCell, build_calendar_grid, month_bounds
from ..core.constants import DEFAULT_DASHBOARD_WORKERS, DEFAULT_RECENT_LIMIT, DEFAULT_UPCOMING_LIMIT
from ..directory.repository import DirectoryRepository
from ..schedules.model import Schedule
from ..schedules.repository import ScheduleRepository
from ..statistics.aggregator import assessment_progress, compute_rubric_summary
from ..statistics.model import NoData, RubricSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleOverview:
    schedule: Schedule
    total_students: int
    assessment_progress: float
    rubric: Union[RubricSummary, NoData]


@dataclass(frozen=True)
class DashboardData:
    year: int
    month: int
    weeks: list[list[Optional[CalendarCell]]]
    recent: Sequence[ScheduleOverview]
    upcoming: Sequence[ScheduleOverview]
    school_count: int
    teacher_count: int
    student_count: int
    failed: tuple[str, ...] = ()


class DashboardService:
    """Loads the dashboard from several independent fetches.

    Fetches run concurrently and are awaited together. A fetch that raises is
    logged and replaced by its default (empty list or 0); the others still
    complete, and the names of failed fetches are reported in ``failed``.
    """

    def __init__(
        self,
        schedules: ScheduleRepository,
        directory: DirectoryRepository,
        attendance: AttendanceRepository,
        *,
        max_workers: int = DEFAULT_DASHBOARD_WORKERS,
        upcoming_limit: int = DEFAULT_UPCOMING_LIMIT,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
    ):
        self._schedules = schedules
        self._directory = directory
        self._attendance = attendance
        self._max_workers = max(int(max_workers), 1)
        self._upcoming_limit = int(upcoming_limit)
        self._recent_limit = int(recent_limit)

    def _gather(self, fetches: dict[str, tuple[Callable[[], Any], Any]]) -> tuple[dict[str, Any], tuple[str, ...]]:
        results: dict[str, Any] = {}
        failed: list[str] = []
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            futures = {name: pool.submit(fn) for name, (fn, _) in fetches.items()}
            for name, future in futures.items():
                try:
                    results[name] = future.result()
                except Exception:
                    logger.exception("Dashboard fetch %r failed; using default", name)
                    results[name] = fetches[name][1]
                    failed.append(name)
        return results, tuple(failed)

    def overview(self, schedule: Schedule) -> ScheduleOverview:
        rubric = compute_rubric_summary(self._attendance.list_for_schedule(schedule.schedule_id))
        total = self._directory.count_students(school_id=schedule.school_id)
        assessed = rubric.assessed_students if rubric else 0
        return ScheduleOverview(
            schedule=schedule,
            total_students=total,
            assessment_progress=assessment_progress(total, assessed),
            rubric=rubric,
        )

    def _recent(self, today: date) -> list[ScheduleOverview]:
        return [self.overview(s) for s in self._schedules.list_recent(until=today, limit=self._recent_limit)]

    def _upcoming(self, today: date) -> list[ScheduleOverview]:
        # today's sessions are listed under recent
        tomorrow = today + timedelta(days=1)
        return [self.overview(s) for s in self._schedules.list_upcoming(from_date=tomorrow, limit=self._upcoming_limit)]

    def load(self, *, today: date) -> DashboardData:
        start, end = month_bounds(today.year, today.month)

        results, failed = self._gather(
            {
                "month_schedules": (lambda: self._schedules.list_range(start=start, end=end), []),
                "recent": (lambda: self._recent(today), []),
                "upcoming": (lambda: self._upcoming(today), []),
                "school_count": (self._directory.count_schools, 0),
                "teacher_count": (self._directory.count_teachers, 0),
                "student_count": (self._directory.count_students, 0),
            }
        )

        return DashboardData(
            year=today.year,
            month=today.month,
            weeks=build_calendar_grid(today.year, today.month, results["month_schedules"]),
            recent=list(results["recent"]),
            upcoming=list(results["upcoming"]),
            school_count=int(results["school_count"]),
            teacher_count=int(results["teacher_count"]),
            student_count=int(results["student_count"]),
            failed=failed,
        )
