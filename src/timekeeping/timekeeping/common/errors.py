from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import ConflictError, DataInvariantError, DomainError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Most specific first; DomainError catches whatever is left.
_STATUS = (
    (ValidationError, "validation", 400),
    (NotFoundError, "not_found", 404),
    (ConflictError, "conflict", 409),
    (DataInvariantError, "invalid_data", 422),
    (DomainError, "domain_error", 400),
)


def error_body(kind: str, message: str):
    return jsonify({"error": kind, "message": message})


def register_error_handlers(app: Flask) -> None:
    def make_handler(kind: str, status: int):
        def handler(exc: DomainError):
            if status >= 422:
                logger.warning("[http] %s: %s", kind, exc)
            return error_body(kind, str(exc)), status

        return handler

    for exc_type, kind, status in _STATUS:
        app.register_error_handler(exc_type, make_handler(kind, status))

    @app.errorhandler(HTTPException)
    def http_error(exc: HTTPException):
        return error_body(exc.name.lower().replace(" ", "_"), exc.description or exc.name), exc.code
