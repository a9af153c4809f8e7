from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.http import json_body
from ..common.serialization import to_jsonable
from ..common.validators import require_non_empty
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.work_time_service

    @app.get("/api/work-time-requests/<int:request_id>")
    def get_work_time_request(request_id: int):
        return jsonify(to_jsonable(service.get(request_id)))

    @app.post("/api/work-time-requests/<int:request_id>/response")
    def respond_work_time_request(request_id: int):
        body = json_body()
        response = service.respond(
            request_id=request_id,
            approved=body.get("approved"),
            message=body.get("message"),
            responder_id=body.get("responded_by"),
        )
        return jsonify(to_jsonable(response)), 201

    @app.put("/api/work-time-requests/<int:request_id>/response")
    def update_work_time_response(request_id: int):
        body = json_body()
        response = service.update_response(
            request_id=request_id,
            approved=body.get("approved"),
            message=body.get("message"),
            responder_id=body.get("responded_by"),
        )
        return jsonify(to_jsonable(response))

    @app.post("/api/work-time-requests/management")
    def create_management_work_time_requests():
        body = json_body()
        employee_ids = body.get("employee_ids")
        if employee_ids is None and body.get("employee_id") is not None:
            employee_ids = [body["employee_id"]]
        if not isinstance(employee_ids, list):
            raise ValidationError("employee_ids must be a list")
        ids = service.create_management_request(
            manager_id=body.get("manager_id"),
            employee_ids=employee_ids,
            work_date=parse_iso_date(require_non_empty(body.get("work_date"), "work_date")),
            request_type=require_non_empty(body.get("type"), "type"),
            duration=body.get("duration"),
            reason=body.get("reason"),
        )
        return jsonify({"request_ids": ids}), 201
