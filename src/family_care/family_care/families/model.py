from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import MemberStatus, Relationship


@dataclass(frozen=True)
class FamilyMember:
    id: str
    family_id: str
    relationship: Relationship
    korean_name: str = ""
    english_name: str = ""
    birth_date: Optional[date] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    courses: tuple[str, ...] = ()
    grade_level: Optional[str] = None
    grade_group: Optional[str] = None
    school: Optional[str] = None
    display_order: int = 0

    @property
    def has_name(self) -> bool:
        return bool(self.korean_name.strip() or self.english_name.strip())

    @property
    def is_spouse(self) -> bool:
        return self.relationship in (Relationship.HUSBAND, Relationship.WIFE)


@dataclass(frozen=True)
class Family:
    """Domain entity: a household and its members."""

    id: str
    family_code: Optional[str]
    family_name: str
    member_status: MemberStatus
    visited_date: Optional[date] = None
    registration_date: Optional[date] = None
    phone_number: str = ""
    email: Optional[str] = None
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    full_address: str = ""
    family_notes: Optional[str] = None
    family_picture: Optional[str] = None
    life_group: Optional[str] = None
    support_team_member: Optional[str] = None
    biz: Optional[str] = None
    biz_title: Optional[str] = None
    biz_category: Optional[str] = None
    biz_name: Optional[str] = None
    biz_intro: Optional[str] = None
    team_id: Optional[str] = None
    display_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    members: tuple[FamilyMember, ...] = field(default=())


@dataclass(frozen=True)
class FamilyFilters:
    """Search criteria for the family list; empty values mean "no filter"."""

    name: Optional[str] = None
    life_group: Optional[str] = None
    support_team_member: Optional[str] = None
    member_statuses: tuple[str, ...] = ()
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    team_id: Optional[str] = None
    unassigned: bool = False
    courses: tuple[str, ...] = ()
