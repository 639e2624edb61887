from __future__ import annotations

from typing import Protocol, Sequence

from .model import AssessmentEntry, AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_schedule(self, schedule_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def upsert_many(self, *, schedule_id: int, entries: Sequence[AssessmentEntry]) -> int:
        """Create or update one record per entry in a single transaction.

        Returns the number of entries written.
        """

        raise NotImplementedError
