from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_EMPLOYEE_CODE = re.compile(r"\d+")


def require_non_empty(value: Any, field_name: str) -> str:
    v = str(value).strip() if value is not None else ""
    if not v:
        raise ValidationError(f"{field_name} is required")
    return v


def require_int(value: Any, field_name: str) -> int:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} is required")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field_name} must be an integer") from exc


def require_positive_int(value: Any, field_name: str) -> int:
    v = require_int(value, field_name)
    if v <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return v


def parse_employee_code(value: Any) -> Optional[str]:
    """Device-reported employee code, or None when it is not purely numeric."""
    code = str(value if value is not None else "").strip()
    if not _EMPLOYEE_CODE.fullmatch(code):
        return None
    return code
