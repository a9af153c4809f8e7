from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..common.serialization import to_jsonable
from ..common.validators import require_positive_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.work_hour_service

    @app.get("/api/attendances/<int:attendance_id>/work-hours")
    def get_work_hours(attendance_id: int):
        return jsonify(to_jsonable(service.get_for_attendance(attendance_id)))

    @app.post("/api/attendances/<int:attendance_id>/work-hours")
    def recompute_work_hours(attendance_id: int):
        processed_by = require_positive_int(json_body().get("processed_by"), "processed_by")
        return jsonify(to_jsonable(service.recompute(attendance_id, processed_by=processed_by)))
