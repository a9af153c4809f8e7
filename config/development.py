import os

from .defaults import (  # noqa: F401
    ATTENDANCE_DEFAULTS,
    JOB_BACKOFF_SECONDS,
    JOB_MAX_ATTEMPTS,
    OVERNIGHT_CHECKOUT_ALLOWANCE_MINUTES,
    WORK_HOUR_ITEM_WORKERS,
    WORK_HOUR_QUEUE_WORKERS,
    db_config_from_env,
    env_flag,
)

DB_CONFIG = db_config_from_env(password="root")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, the app applies database/schema.sql on startup (CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
RESUME_JOBS_ON_START = env_flag("RESUME_JOBS_ON_START", "1")
