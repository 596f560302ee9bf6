from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from ..common.schemas import APIModel
from ..core.enums import AnnouncementType


def _local_naive(value: Optional[datetime]) -> Optional[datetime]:
    # stored as local DATETIME
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def _expand_date(value, time_part: str):
    if isinstance(value, str) and len(value.strip()) == 10:
        return f"{value.strip()}T{time_part}"
    return value


class _Window(APIModel):
    @field_validator("start_date", mode="before", check_fields=False)
    @classmethod
    def _start_of_day(cls, value):
        return _expand_date(value, "00:00:00")

    @field_validator("end_date", mode="before", check_fields=False)
    @classmethod
    def _end_of_day(cls, value):
        return _expand_date(value, "23:59:59")

    @field_validator("start_date", "end_date", check_fields=False)
    @classmethod
    def _naive(cls, value):
        return _local_naive(value)


class AnnouncementCreate(_Window):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    type: AnnouncementType = AnnouncementType.MEDIUM
    is_login_required: bool = True
    start_date: datetime
    end_date: datetime
    is_active: bool = True


class AnnouncementUpdate(_Window):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    type: Optional[AnnouncementType] = None
    is_login_required: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
