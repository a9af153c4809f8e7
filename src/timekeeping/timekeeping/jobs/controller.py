from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..common.serialization import to_jsonable
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    queue = container.work_hour_queue

    @app.post("/api/work-hours/batches")
    def enqueue_work_hour_batch():
        body = json_body()
        attendance_ids = body.get("attendance_ids")
        if not isinstance(attendance_ids, list):
            raise ValidationError("attendance_ids must be a list")
        batch_id = queue.enqueue(attendance_ids, body.get("processed_by"), batch_id=body.get("batch_id"))
        return jsonify({"batch_id": batch_id}), 202

    @app.get("/api/work-hours/batches/<batch_id>")
    def get_work_hour_batch(batch_id: str):
        return jsonify(to_jsonable(queue.get_job(batch_id)))

    @app.post("/api/cutoffs/<int:cutoff_id>/work-hours")
    def recalculate_cutoff_work_hours(cutoff_id: int):
        batch_id = queue.recalculate_cutoff(cutoff_id, json_body().get("processed_by"))
        return jsonify({"batch_id": batch_id}), 202
