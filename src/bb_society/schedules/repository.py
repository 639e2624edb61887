from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ScheduleStatus
from .model import Schedule, ScheduleInput, ScheduleProgress


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date, school_id: Optional[int] = None) -> Sequence[Schedule]:
        """Schedules dated within [start, end], ordered by date then time."""

        raise NotImplementedError

    def list_upcoming(self, *, from_date: date, limit: int) -> Sequence[Schedule]:
        raise NotImplementedError

    def list_recent(self, *, until: date, limit: int) -> Sequence[Schedule]:
        """Schedules dated on or before ``until``, newest first."""

        raise NotImplementedError

    def list_open_progress(self) -> Sequence[ScheduleProgress]:
        """Schedules still ``scheduled``/``in-progress`` with their assessment counts."""

        raise NotImplementedError

    def update_statuses(self, changes: Sequence[tuple[int, ScheduleStatus]]) -> int:
        """Apply every (schedule_id, status) change in one transaction."""

        raise NotImplementedError

    def create(self, data: ScheduleInput) -> int:
        raise NotImplementedError

    def update(self, *, schedule_id: int, data: ScheduleInput) -> None:
        """Replace the schedule's fields and its teacher/lesson links."""

        raise NotImplementedError

    def delete(self, *, schedule_id: int) -> bool:
        raise NotImplementedError
