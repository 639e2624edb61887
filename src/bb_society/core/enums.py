from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Per-student outcome stored for one schedule."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class ScheduleStatus(str, Enum):
    """Lifecycle of a teaching session."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


class ScorePolicy(str, Enum):
    """How the aggregator treats scores outside [0, 100]."""

    PASS_THROUGH = "pass_through"
    CLAMP = "clamp"
    REJECT = "reject"
