from __future__ import annotations

from enum import Enum


class StaffGroup(str, Enum):
    """Role tier stored on each staff row."""

    ADM = "ADM"
    MGM = "MGM"
    TEAM_A = "TEAM-A"
    TEAM_B = "TEAM-B"

    @property
    def is_admin(self) -> bool:
        return self in (StaffGroup.ADM, StaffGroup.MGM)

    @property
    def is_super_admin(self) -> bool:
        return self == StaffGroup.ADM


class MemberStatus(str, Enum):
    VISIT = "visit"
    MEMBER = "member"
    PENDING = "pending"


class Relationship(str, Enum):
    HUSBAND = "husband"
    WIFE = "wife"
    CHILD = "child"
    OTHER = "other"


class CareLogStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AnnouncementType(str, Enum):
    """Major announcements pop up as a modal on the dashboard."""

    MAJOR = "Major"
    MEDIUM = "Medium"
    MINOR = "Minor"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    PENDING = "pending"


class DonationType(str, Enum):
    REGULAR = "Regular"
    SPECIAL = "Special"
