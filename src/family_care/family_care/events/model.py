from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..staff.model import StaffRef


@dataclass(frozen=True)
class Event:
    id: str
    title: str
    date: date
    time: str
    location: str
    created_by: str
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by_staff: Optional[StaffRef] = None


@dataclass(frozen=True)
class AttendanceFamily:
    id: str
    family_name: str


@dataclass(frozen=True)
class AttendanceMember:
    id: str
    korean_name: str
    english_name: str
    relationship: str
    grade_group: Optional[str] = None

    @property
    def has_name(self) -> bool:
        return bool((self.korean_name or "").strip() or (self.english_name or "").strip())


@dataclass(frozen=True)
class Attendance:
    """One attendance row: a named member, or the whole family when family_member_id is None."""

    id: str
    event_id: str
    family_id: str
    family_member_id: Optional[str]
    attendance_status: AttendanceStatus
    updated_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    family: Optional[AttendanceFamily] = None
    family_member: Optional[AttendanceMember] = None
    updated_by_staff: Optional[StaffRef] = None


@dataclass(frozen=True)
class NewAttendance:
    family_id: str
    family_member_id: Optional[str]
    updated_by: str
    attendance_status: AttendanceStatus = AttendanceStatus.PENDING


@dataclass
class AttendanceStats:
    present: int = 0
    absent: int = 0
    pending: int = 0
    total_members: int = 0
    family_count: int = 0
    present_family_count: int = 0
    parent_count: int = 0
    present_parent_count: int = 0
    child_count: int = 0
    present_child_count: int = 0
    youth: int = 0
    youth_middle: int = 0
    youth_high: int = 0
    team_kid: int = 0
    dream_kid: int = 0
    sprouts: int = 0
    college: int = 0
    present_youth: int = 0
    present_team_kid: int = 0
    present_dream_kid: int = 0
    present_sprouts: int = 0
    present_college: int = 0
