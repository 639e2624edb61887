from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.http import int_arg, json_view, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schedules/calendar", methods=["GET"], endpoint="api_schedules_calendar")
    @json_view
    def schedules_calendar():
        today = date.today()
        data = container.schedule_service.calendar_for_month(
            year=int_arg(request.args.get("year"), "year", today.year),
            month=int_arg(request.args.get("month"), "month", today.month),
            school_id=int_arg(request.args.get("school_id"), "school_id"),
            preview_limit=int_arg(request.args.get("preview"), "preview"),
        )
        return ok(data)

    @app.route("/api/schedules", methods=["POST"], endpoint="api_schedules_create")
    @json_view
    def schedules_create():
        schedule = container.schedule_service.create(request.get_json(silent=True))
        return ok(schedule, 201)

    @app.route("/api/schedules/<int:schedule_id>", methods=["GET"], endpoint="api_schedules_get")
    @json_view
    def schedules_get(schedule_id: int):
        return ok(container.schedule_service.get(schedule_id))

    @app.route("/api/schedules/<int:schedule_id>", methods=["PUT"], endpoint="api_schedules_update")
    @json_view
    def schedules_update(schedule_id: int):
        schedule = container.schedule_service.update(schedule_id, request.get_json(silent=True))
        return ok(schedule)

    @app.route("/api/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="api_schedules_delete")
    @json_view
    def schedules_delete(schedule_id: int):
        container.schedule_service.delete(schedule_id)
        return ok({"deleted": schedule_id})

    @app.route("/api/schedules/<int:schedule_id>/statistics", methods=["GET"], endpoint="api_schedule_statistics")
    @json_view
    def schedule_statistics(schedule_id: int):
        # null when the schedule is not completed or has no records
        return ok(container.schedule_service.statistics_for(schedule_id))

    @app.route("/api/schedules/auto-update-status", methods=["POST"], endpoint="api_schedules_auto_update")
    @json_view
    def schedules_auto_update():
        updated = container.schedule_service.auto_update_statuses(now=now_local())
        return ok({"updated_count": updated})
