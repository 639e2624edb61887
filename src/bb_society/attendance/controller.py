from __future__ import annotations

from flask import Flask, request

from ..common.http import json_view, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schedules/<int:schedule_id>/assessment", methods=["GET"], endpoint="api_assessment_list")
    @json_view
    def assessment_list(schedule_id: int):
        records = container.assessment_service.records_for_schedule(schedule_id)
        return ok(list(records))

    @app.route("/api/schedules/<int:schedule_id>/assessment", methods=["POST"], endpoint="api_assessment_save")
    @json_view
    def assessment_save(schedule_id: int):
        payload = request.get_json(silent=True)
        saved = container.assessment_service.save_assessments(schedule_id=schedule_id, payload=payload)
        return ok({"saved_count": saved})

    @app.route("/api/students/<int:student_id>/statistics", methods=["GET"], endpoint="api_student_statistics")
    @json_view
    def student_statistics(student_id: int):
        return ok(container.assessment_service.student_statistics(student_id))
