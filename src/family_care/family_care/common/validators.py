from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_PIN_RE = re.compile(r"^\d{4}$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_pin(value: Optional[str]) -> str:
    if value is None or not _PIN_RE.match(value):
        raise ValidationError("PIN must be exactly 4 digits")
    return value


def parse_bool_flag(value: Optional[str]) -> Optional[bool]:
    """Query-string tri-state: '' / None / 'all' means no filter."""
    if value is None:
        return None
    v = value.strip().lower()
    if v in {"", "all"}:
        return None
    if v in {"true", "1", "yes"}:
        return True
    if v in {"false", "0", "no"}:
        return False
    raise ValidationError(f"Invalid boolean value: {value!r}")
