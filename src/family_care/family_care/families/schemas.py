from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import Field, field_validator

from ..common.schemas import APIModel
from ..core.constants import COURSE_CODES
from ..core.enums import MemberStatus, Relationship


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class FamilyMemberIn(APIModel):
    id: Optional[str] = None
    korean_name: str = Field(default="", max_length=255)
    english_name: str = Field(default="", max_length=255)
    birth_date: Optional[date] = None
    phone_number: Optional[str] = Field(default=None, max_length=20)
    email: Optional[str] = Field(default=None, max_length=255)
    relationship: Relationship
    courses: list[str] = Field(default_factory=list)
    grade_level: Optional[str] = Field(default=None, max_length=10)
    grade_group: Optional[str] = Field(default=None, max_length=50)
    school: Optional[str] = Field(default=None, max_length=255)
    display_order: Optional[int] = None

    @field_validator("birth_date", "id", "grade_level", "grade_group", mode="before")
    @classmethod
    def _blank_optional(cls, value):
        return _blank_to_none(value)

    @field_validator("courses")
    @classmethod
    def _known_courses(cls, value: list[str]) -> list[str]:
        unknown = [c for c in value if c not in COURSE_CODES]
        if unknown:
            raise ValueError(f"Unknown course codes: {', '.join(unknown)}")
        return value


class _FamilyFields(APIModel):
    visited_date: Optional[date] = None
    registration_date: Optional[date] = None
    phone_number: str = Field(default="", max_length=20)
    email: Optional[str] = Field(default=None, max_length=255)
    address: str = Field(default="", max_length=255)
    city: str = Field(default="", max_length=100)
    state: str = Field(default="", max_length=50)
    zip_code: str = Field(default="", max_length=10)
    family_notes: Optional[str] = None
    family_picture: Optional[str] = Field(default=None, max_length=500)
    life_group: Optional[str] = Field(default=None, max_length=255)
    support_team_member: Optional[str] = Field(default=None, max_length=255)
    biz: Optional[str] = Field(default=None, max_length=255)
    biz_title: Optional[str] = Field(default=None, max_length=255)
    biz_category: Optional[str] = Field(default=None, max_length=255)
    biz_name: Optional[str] = Field(default=None, max_length=255)
    biz_intro: Optional[str] = None
    team_id: Optional[str] = None
    display_order: int = 0

    @field_validator("visited_date", "registration_date", "team_id", mode="before")
    @classmethod
    def _blank_optional(cls, value):
        return _blank_to_none(value)


class FamilyCreate(_FamilyFields):
    family_code: Optional[str] = Field(default=None, max_length=20)
    family_name: str = Field(default="", max_length=255)
    member_status: MemberStatus = MemberStatus.VISIT
    members: list[FamilyMemberIn] = Field(default_factory=list)

    def fields(self) -> dict:
        return self.model_dump(exclude={"members"})

    def member_dicts(self) -> list[dict]:
        return [m.model_dump() for m in self.members]


class FamilyUpdate(APIModel):
    family_name: Optional[str] = Field(default=None, max_length=255)
    member_status: Optional[MemberStatus] = None
    visited_date: Optional[date] = None
    registration_date: Optional[date] = None
    phone_number: Optional[str] = Field(default=None, max_length=20)
    email: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=50)
    zip_code: Optional[str] = Field(default=None, max_length=10)
    family_notes: Optional[str] = None
    family_picture: Optional[str] = Field(default=None, max_length=500)
    life_group: Optional[str] = Field(default=None, max_length=255)
    support_team_member: Optional[str] = Field(default=None, max_length=255)
    biz: Optional[str] = Field(default=None, max_length=255)
    biz_title: Optional[str] = Field(default=None, max_length=255)
    biz_category: Optional[str] = Field(default=None, max_length=255)
    biz_name: Optional[str] = Field(default=None, max_length=255)
    biz_intro: Optional[str] = None
    team_id: Optional[str] = None
    display_order: Optional[int] = None
    members: Optional[list[FamilyMemberIn]] = None

    @field_validator("visited_date", "registration_date", "team_id", mode="before")
    @classmethod
    def _blank_optional(cls, value):
        return _blank_to_none(value)

    def field_changes(self) -> dict:
        changes = self.changes()
        changes.pop("members", None)
        for key in ("member_status", "display_order"):
            if key in changes and changes[key] is None:
                changes.pop(key)
        # address parts are NOT NULL columns
        for key in ("phone_number", "address", "city", "state", "zip_code"):
            if key in changes and changes[key] is None:
                changes[key] = ""
        return changes

    def member_dicts(self) -> Optional[list[dict]]:
        if "members" not in self.model_fields_set or self.members is None:
            return None
        return [m.model_dump() for m in self.members]


class FamilyOrder(APIModel):
    team_id: Optional[str] = None
    family_ids: list[str]
