"""Attendance roll-call helpers.

Both functions are pure so the event service and tests can share them.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..core.constants import COLLEGE_GROUP
from ..core.enums import AttendanceStatus
from ..families.model import Family
from .model import Attendance, AttendanceStats, NewAttendance

# grade group -> (counter, present counter)
_GROUP_COUNTERS = {
    "Youth(Middle)": ("youth", "present_youth"),
    "Youth(High)": ("youth", "present_youth"),
    "Team Kid": ("team_kid", "present_team_kid"),
    "Dream Kid": ("dream_kid", "present_dream_kid"),
    "Sprouts": ("sprouts", "present_sprouts"),
    COLLEGE_GROUP: ("college", "present_college"),
}


def build_initial_attendance(families: Iterable[Family], updated_by: str) -> list[NewAttendance]:
    """One pending row per named member; a family with no named member gets one family-level row."""
    rows: list[NewAttendance] = []
    for family in families:
        named = [m for m in family.members if m.has_name]
        if not named:
            rows.append(NewAttendance(family_id=family.id, family_member_id=None, updated_by=updated_by))
            continue
        for member in named:
            rows.append(NewAttendance(family_id=family.id, family_member_id=member.id, updated_by=updated_by))
    return rows


def attendance_stats(rows: Sequence[Attendance]) -> AttendanceStats:
    stats = AttendanceStats()
    families: set[str] = set()
    present_families: set[str] = set()

    for row in rows:
        member = row.family_member
        if row.family_member_id and (member is None or not member.has_name):
            continue

        is_present = row.attendance_status == AttendanceStatus.PRESENT
        stats.total_members += 1
        families.add(row.family_id)
        if is_present:
            stats.present += 1
            present_families.add(row.family_id)
        elif row.attendance_status == AttendanceStatus.ABSENT:
            stats.absent += 1
        else:
            stats.pending += 1

        group = member.grade_group if member else None
        counters = _GROUP_COUNTERS.get(group or "")
        if counters:
            total_name, present_name = counters
            setattr(stats, total_name, getattr(stats, total_name) + 1)
            if is_present:
                setattr(stats, present_name, getattr(stats, present_name) + 1)
            if group == "Youth(Middle)":
                stats.youth_middle += 1
            elif group == "Youth(High)":
                stats.youth_high += 1
        else:
            stats.parent_count += 1
            if is_present:
                stats.present_parent_count += 1

    stats.child_count = stats.youth + stats.team_kid + stats.dream_kid + stats.sprouts + stats.college
    stats.present_child_count = (
        stats.present_youth
        + stats.present_team_kid
        + stats.present_dream_kid
        + stats.present_sprouts
        + stats.present_college
    )
    stats.family_count = len(families)
    stats.present_family_count = len(present_families)
    return stats
