from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AnnouncementType
from ..staff.model import StaffRef


@dataclass(frozen=True)
class Announcement:
    """A notice shown on the login page (is_login_required=False) or the dashboard (True)."""

    id: str
    title: str
    content: str
    type: AnnouncementType
    is_login_required: bool
    start_date: datetime
    end_date: datetime
    created_by: str
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by_staff: Optional[StaffRef] = None

    def in_window(self, now: datetime) -> bool:
        return self.start_date <= now <= self.end_date

    def visible_at(self, now: datetime) -> bool:
        return self.is_active and self.in_window(now)
