from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.errors import register_error_handlers
from .common.logging import configure_logging
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .jobs.controller import register as register_jobs
from .work_hours.controller import register as register_work_hours
from .work_time.controller import register as register_work_time

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def settings_dict(settings) -> dict:
    return {name: getattr(settings, name) for name in dir(settings) if name.isupper()}


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        logger.info(
            "[app] settings=%s db=%s@%s:%s/%s",
            settings_module, db_config.get("user"), db_config.get("host"), db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("[app] schema ready (tables=%s)", len(list_tables(db_config)))
        container = build_container(db_config=db_config, settings=settings_dict(settings))
        if bool(getattr(settings, "RESUME_JOBS_ON_START", False)):
            container.work_hour_queue.resume_unfinished()

    app.extensions["timekeeping"] = container
    register_error_handlers(app)

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    register_attendance(app, container)
    register_work_time(app, container)
    register_work_hours(app, container)
    register_jobs(app, container)

    return app
