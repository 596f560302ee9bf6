from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import Field

from ..common.schemas import APIModel
from ..core.enums import AttendanceStatus

TIME_PATTERN = r"^\d{1,2}:\d{2}( ?[AaPp][Mm])?$"


class EventCreate(APIModel):
    title: str = Field(min_length=1, max_length=255)
    date: dt.date
    time: str = Field(pattern=TIME_PATTERN)
    location: str = Field(min_length=1, max_length=255)
    is_active: bool = True


class EventUpdate(APIModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    date: Optional[dt.date] = None
    time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    location: Optional[str] = Field(default=None, min_length=1, max_length=255)
    is_active: Optional[bool] = None


class AttendanceUpdate(APIModel):
    attendance_status: AttendanceStatus
