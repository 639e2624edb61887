from __future__ import annotations

from datetime import date

from flask import Flask

from ..common.http import json_view, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard", methods=["GET"], endpoint="api_dashboard")
    @json_view
    def dashboard():
        return ok(container.dashboard_service.load(today=date.today()))
