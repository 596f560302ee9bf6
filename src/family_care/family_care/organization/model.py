from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Department:
    id: str
    name: str
    description: Optional[str] = None
    contact_person_name: Optional[str] = None
    contact_person_phone: Optional[str] = None
    contact_person_email: Optional[str] = None
    picture: Optional[str] = None
    display_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Team:
    """A care team under a department; staff are assigned through team_staff."""

    id: str
    department_id: str
    name: str
    description: Optional[str] = None
    contact_person_name: Optional[str] = None
    contact_person_phone: Optional[str] = None
    contact_person_email: Optional[str] = None
    picture: Optional[str] = None
    display_order: int = 0
    assigned_staff: tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class TeamBranch:
    team: Team
    families: tuple = ()


@dataclass(frozen=True)
class DepartmentBranch:
    department: Department
    teams: tuple[TeamBranch, ...] = ()
