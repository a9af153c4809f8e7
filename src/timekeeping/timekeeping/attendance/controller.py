from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.http import json_body
from ..common.serialization import to_jsonable
from ..common.validators import require_non_empty, require_positive_int
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.post("/api/devices/<device_id>/punches")
    def ingest_device_punches(device_id: str):
        punches = json_body().get("punches")
        if not isinstance(punches, list):
            raise ValidationError("punches must be a list")
        summary = service.ingest_attendance_batch(device_id, punches)
        return jsonify(to_jsonable(summary))

    @app.post("/api/devices/<device_id>/sync")
    def sync_device_buffer(device_id: str):
        return jsonify(to_jsonable(service.ingest_pending(device_id)))

    @app.get("/api/attendances/<int:attendance_id>/punches")
    def list_attendance_punches(attendance_id: int):
        return jsonify(to_jsonable(list(service.list_punches(attendance_id))))

    @app.post("/api/attendances/finalize")
    def finalize_attendances():
        body = json_body()
        work_date = parse_iso_date(require_non_empty(body.get("work_date"), "work_date"))
        processed_by = require_positive_int(body.get("processed_by"), "processed_by")
        result = service.finalize_day(work_date, processed_by=processed_by)
        return jsonify(to_jsonable(result))
