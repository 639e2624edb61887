"""Example: use the service layer without Flask.

Prints this month's calendar (days with sessions only) and the statistics of
the first completed schedule found.
"""

import importlib
from datetime import date

from bb_society.config import get_settings_module
from bb_society.container import build_container
from bb_society.core.enums import ScheduleStatus


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    today = date.today()
    calendar = container.schedule_service.calendar_for_month(year=today.year, month=today.month)
    for week in calendar.weeks:
        for cell in week:
            if cell and cell.schedules:
                print(cell.day, [s.schedule_id for s in cell.schedules])

    for week in calendar.weeks:
        for cell in week:
            for s in cell.schedules if cell else ():
                if s.status == ScheduleStatus.COMPLETED:
                    print(container.schedule_service.statistics_for(s.schedule_id))
                    return


if __name__ == "__main__":
    main()
