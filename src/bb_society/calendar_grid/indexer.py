"""Month grid of schedules.

Rows are weeks starting on Sunday. Days outside the month are ``None``
padding cells, so every row holds exactly seven entries.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import calendar_date
from ..core.constants import DAYS_PER_WEEK, DEFAULT_CELL_PREVIEW
from ..core.exceptions import ValidationError
from ..schedules.model import Schedule


@dataclass(frozen=True)
class CalendarCell:
    day: date
    schedules: tuple[Schedule, ...] = ()


@dataclass(frozen=True)
class CellSummary:
    day: date
    preview: tuple[Schedule, ...]
    overflow: int


def _validate_month(year: int, month: int) -> None:
    if not 1 <= int(month) <= 12:
        raise ValidationError(f"Invalid month: {month}")
    if not 1 <= int(year) <= 9999:
        raise ValidationError(f"Invalid year: {year}")


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of the month."""
    _validate_month(year, month)
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    _validate_month(year, month)
    index = int(year) * 12 + (int(month) - 1) + int(delta)
    return index // 12, index % 12 + 1


def leading_blanks(first_day: date) -> int:
    # date.weekday() has Monday = 0; the grid starts on Sunday.
    return (first_day.weekday() + 1) % DAYS_PER_WEEK


def build_calendar_grid(year: int, month: int, schedules: Sequence[Schedule]) -> list[list[Optional[CalendarCell]]]:
    """Group ``schedules`` by calendar day into a Sunday-first month grid.

    Grouping compares plain dates, never timestamps. Schedules outside the
    month are dropped and the caller's order is kept within a day.
    """

    first_day, last_day = month_bounds(year, month)

    by_day: dict[date, list[Schedule]] = {}
    for s in schedules:
        day = calendar_date(s.scheduled_date)
        if first_day <= day <= last_day:
            by_day.setdefault(day, []).append(s)

    cells: list[Optional[CalendarCell]] = [None] * leading_blanks(first_day)
    for day_number in range(1, last_day.day + 1):
        day = date(first_day.year, first_day.month, day_number)
        cells.append(CalendarCell(day=day, schedules=tuple(by_day.get(day, ()))))

    remainder = len(cells) % DAYS_PER_WEEK
    if remainder:
        cells.extend([None] * (DAYS_PER_WEEK - remainder))

    return [cells[i : i + DAYS_PER_WEEK] for i in range(0, len(cells), DAYS_PER_WEEK)]


def cell_summary(cell: CalendarCell, limit: int = DEFAULT_CELL_PREVIEW) -> CellSummary:
    """Compact view of a cell: the first ``limit`` schedules plus how many are hidden."""
    limit = max(int(limit), 0)
    return CellSummary(
        day=cell.day,
        preview=cell.schedules[:limit],
        overflow=max(len(cell.schedules) - limit, 0),
    )
