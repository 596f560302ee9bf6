from __future__ import annotations

from typing import Optional

from pydantic import Field

from ..common.schemas import APIModel
from ..core.enums import StaffGroup

PIN_PATTERN = r"^\d{4}$"


class LoginRequest(APIModel):
    nickname: Optional[str] = None
    pin: Optional[str] = None


class StaffCreate(APIModel):
    full_name: str = Field(min_length=1, max_length=255)
    nick_name: str = Field(min_length=1, max_length=100)
    personal_pin: str = Field(pattern=PIN_PATTERN)
    group: StaffGroup
    email: Optional[str] = Field(default=None, max_length=255)
    display_order: int = 0
    is_active: bool = True


class StaffUpdate(APIModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    nick_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    personal_pin: Optional[str] = Field(default=None, pattern=PIN_PATTERN)
    group: Optional[StaffGroup] = None
    email: Optional[str] = Field(default=None, max_length=255)
    display_order: Optional[int] = None
    is_active: Optional[bool] = None


class ProfileUpdate(APIModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    nick_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    personal_pin: Optional[str] = Field(default=None, pattern=PIN_PATTERN)
    email: Optional[str] = Field(default=None, max_length=255)


class StaffOrder(APIModel):
    staff_ids: list[str]
