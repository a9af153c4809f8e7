from __future__ import annotations

from datetime import time

# Seeds for AttendanceConfiguration; tenants override them per organization.
DEFAULT_GRACE_PERIOD_MINUTES = 5
DEFAULT_EARLY_TIME_THRESHOLD_MINUTES = 15
DEFAULT_UNDER_TIME_THRESHOLD_MINUTES = 0
DEFAULT_OVERTIME_THRESHOLD_MINUTES = 30
DEFAULT_ROUNDING_STEP_MINUTES = 30
DEFAULT_NO_TIME_IN_DEDUCTION_MINUTES = 60
DEFAULT_NO_TIME_OUT_DEDUCTION_MINUTES = 60

# How long after an overnight shift ends a punch still closes that shift.
DEFAULT_OVERNIGHT_CHECKOUT_ALLOWANCE_MINUTES = 240

NIGHT_DIFFERENTIAL_START = time(22, 0)
NIGHT_DIFFERENTIAL_END = time(6, 0)

HOURS_PRECISION = 2

# A batch job fails when more than this share of its attendances failed.
BATCH_FAILURE_RATIO = 0.5
DEFAULT_JOB_MAX_ATTEMPTS = 3
DEFAULT_JOB_BACKOFF_SECONDS = 5.0

NOTIFICATION_CATEGORY = "ATTENDANCE"
MANAGEMENT_AUTO_APPROVAL_MESSAGE = "Auto-approved management request"
