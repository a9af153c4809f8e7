import os

from .defaults import ATTENDANCE_DEFAULTS, db_config_from_env, env_flag  # noqa: F401

DB_CONFIG = db_config_from_env(database="timekeeping_test")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

# Tests run jobs inline and never wait between retries.
WORK_HOUR_QUEUE_WORKERS = 1
WORK_HOUR_ITEM_WORKERS = 1
JOB_MAX_ATTEMPTS = 3
JOB_BACKOFF_SECONDS = 0.0
OVERNIGHT_CHECKOUT_ALLOWANCE_MINUTES = 240

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
RESUME_JOBS_ON_START = False
