import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


def db_config_from_env(*, password: str = "", database: str = "timekeeping_db") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", password),
        "database": os.getenv("DB_NAME", database),
    }


# Work-hour job runner
WORK_HOUR_QUEUE_WORKERS = int(os.getenv("WORK_HOUR_QUEUE_WORKERS", "2"))
# Keep below the MySQL connection budget: each item worker holds one connection at a time.
WORK_HOUR_ITEM_WORKERS = int(os.getenv("WORK_HOUR_ITEM_WORKERS", "4"))
JOB_MAX_ATTEMPTS = int(os.getenv("JOB_MAX_ATTEMPTS", "3"))
JOB_BACKOFF_SECONDS = float(os.getenv("JOB_BACKOFF_SECONDS", "5"))

# Punches up to this long after an overnight shift ends still close it.
OVERNIGHT_CHECKOUT_ALLOWANCE_MINUTES = int(os.getenv("OVERNIGHT_CHECKOUT_ALLOWANCE_MINUTES", "240"))

# Global attendance rules, used when neither the organization nor the global DB row exists.
ATTENDANCE_DEFAULTS = {
    "grace_period_minutes": int(os.getenv("GRACE_PERIOD_MINUTES", "5")),
    "overtime_threshold_minutes": int(os.getenv("OVERTIME_THRESHOLD_MINUTES", "30")),
    "under_time_threshold_minutes": int(os.getenv("UNDER_TIME_THRESHOLD_MINUTES", "0")),
    "no_time_in_deduction_minutes": int(os.getenv("NO_TIME_IN_DEDUCTION_MINUTES", "60")),
    "no_time_out_deduction_minutes": int(os.getenv("NO_TIME_OUT_DEDUCTION_MINUTES", "60")),
}
